"""
Contact Form App

Renders configurable contact forms and emails their submissions.

Features:
- Field, group and button configuration in code or in settings
- Signed nonce and honeypot spam protection
- Server-side validation (required, email, phone, pattern)
- HTML email to the form receiver, or a preview on local hosts
"""
