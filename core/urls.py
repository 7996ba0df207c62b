"""
URL configuration for the Contact Form service.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.urls import path, include

urlpatterns = [
    path('api/contact/', include('contact.urls')),  # Public form rendering and submission
]
