"""
Email Template Service
Loads and renders result notification templates
"""
import re
from typing import Dict, Tuple
from recruitment import db
from recruitment.models.email_template import EmailTemplate


PLACEHOLDER = re.compile(r'\{\{\s*(\w+)\s*\}\}')

TEMPLATE_FOR_KIND = {
    'accepted': 'interview_result_accepted',
    'rejected': 'interview_result_rejected',
}

_BASE_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            background-color: #f4f4f4;
        }
        .container {
            max-width: 600px;
            margin: 40px auto;
            background: #ffffff;
            border-radius: 8px;
            overflow: hidden;
        }
        .content { padding: 40px 30px; }
        .footer { background: #f8f9fa; padding: 20px; text-align: center; color: #666; font-size: 14px; }
"""

DEFAULT_TEMPLATES = {
    'interview_result_accepted': {
        'name': 'Interview result - accepted',
        'subject': '{{organization}} - Offer of membership',
        'html_content': """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>""" + _BASE_STYLE + """    </style>
</head>
<body>
    <div class="container">
        <div class="content">
            <h2 style="color: #10b981;">Congratulations!</h2>
            <p>Hi {{name}},</p>
            <p>We are happy to let you know that you passed your interview on {{scheduled_at}} and have been accepted into {{organization}}.</p>
            <p>We will contact you within a week about onboarding.</p>
        </div>
        <div class="footer">
            <p>{{organization}}</p>
        </div>
    </div>
</body>
</html>
""",
    },
    'interview_result_rejected': {
        'name': 'Interview result - rejected',
        'subject': '{{organization}} - Interview result',
        'html_content': """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>""" + _BASE_STYLE + """    </style>
</head>
<body>
    <div class="container">
        <div class="content">
            <h2 style="color: #6b7280;">Interview result</h2>
            <p>Hi {{name}},</p>
            <p>Thank you for interviewing with {{organization}} on {{scheduled_at}}.</p>
            <p>After careful review we are unable to offer you a place this time. We encourage you to apply again in the next recruitment round.</p>
        </div>
        <div class="footer">
            <p>{{organization}}</p>
        </div>
    </div>
</body>
</html>
""",
    },
}


class EmailTemplateService:
    """Service for result notification email templates"""

    def get_template(self, template_type):
        """Get the active stored template, if any"""
        return EmailTemplate.query.filter_by(type=template_type, is_active=True).first()

    def render(self, template_type: str, variables: Dict[str, object]) -> Tuple[str, str]:
        """
        Render subject and HTML body

        Unknown placeholders are left as they are.

        Args:
            template_type: One of the EmailTemplate types
            variables: Values for {{placeholder}} substitution

        Returns:
            (subject, html_content)
        """
        template = self.get_template(template_type)
        if template:
            subject, html = template.subject, template.html_content
        else:
            default = DEFAULT_TEMPLATES[template_type]
            subject, html = default['subject'], default['html_content']

        def substitute(match):
            key = match.group(1)
            if key not in variables or variables[key] is None:
                return match.group(0)
            return str(variables[key])

        return PLACEHOLDER.sub(substitute, subject), PLACEHOLDER.sub(substitute, html)

    def render_result(self, payload_kind, variables):
        """Render the template matching a notification payload kind"""
        return self.render(TEMPLATE_FOR_KIND[payload_kind], variables)

    def initialize_default_templates(self):
        """
        Store the built-in templates that do not exist yet

        Returns:
            Number of templates created
        """
        created = 0
        for template_type, default in DEFAULT_TEMPLATES.items():
            if EmailTemplate.query.filter_by(type=template_type).first():
                continue
            db.session.add(EmailTemplate(type=template_type, **default))
            created += 1
        db.session.commit()
        return created


# Singleton instance
email_template_service = EmailTemplateService()
