"""
Email Service
Sends emails using Twilio SendGrid
"""
import os
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content


class EmailService:
    """Mail transport for result notifications via Twilio SendGrid"""

    def __init__(self):
        """Initialize SendGrid client"""
        self.api_key = os.environ.get('SENDGRID_API_KEY')
        self.from_email = os.environ.get('SENDGRID_FROM_EMAIL', 'noreply@recruitment.local')
        self.from_name = os.environ.get('SENDGRID_FROM_NAME', 'Recruitment Team')
        self.timeout = int(os.environ.get('NOTIFICATION_SEND_TIMEOUT', 30))

        if not self.api_key:
            print("Warning: SENDGRID_API_KEY not configured. Email sending will be disabled.")
            self.client = None
        else:
            self.client = SendGridAPIClient(self.api_key)
            # Bound the HTTP call so a stalled send cannot hold a worker
            self.client.client.timeout = self.timeout

    @property
    def is_configured(self):
        return self.client is not None

    def send(self, to, subject, html_content, text_content=None):
        """
        Send one email

        Args:
            to: Recipient address
            subject: Subject line
            html_content: HTML body
            text_content: Optional plain text fallback

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        if not self.client:
            print(f"[EMAIL] Skipping email send to {to} (SendGrid not configured)")
            return False

        try:
            message = Mail(
                from_email=Email(self.from_email, self.from_name),
                to_emails=To(to),
                subject=subject,
                html_content=Content("text/html", html_content)
            )
            if text_content:
                message.add_content(Content("text/plain", text_content))

            response = self.client.send(message)

            if response.status_code in [200, 201, 202]:
                print(f"[EMAIL] ✓ Sent '{subject}' to {to}")
                return True
            else:
                print(f"[EMAIL] ✗ Failed to send '{subject}' to {to}: Status {response.status_code}")
                return False

        except Exception as e:
            print(f"[EMAIL] ✗ Error sending '{subject}' to {to}: {type(e).__name__}: {e}")
            return False


# Singleton instance
email_service = EmailService()
