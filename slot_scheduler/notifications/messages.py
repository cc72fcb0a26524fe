"""
Email subjects and bodies sent by the scheduler
"""
import html
from datetime import date, datetime
from typing import Optional, Tuple

FOOTER = "<br>\n<p><em>(This is an automated message)</em></p>"

Message = Tuple[str, str]


def _html(value: Optional[str], default: str) -> str:
    """Sheet cells and form answers go into HTML bodies escaped"""
    return html.escape(value or default)


class MessageBuilder:
    """Formats dates and times with the configured patterns and builds messages"""

    def __init__(self, config):
        self.config = config

    def format_date(self, value: Optional[date]) -> str:
        return value.strftime(self.config.DISPLAY_DATE_FORMAT) if value else "[Date Unknown]"

    def format_time(self, value: Optional[datetime]) -> str:
        return value.strftime(self.config.DISPLAY_TIME_FORMAT) if value else "[Time Unknown]"

    def confirmation(self, requester, booking) -> Message:
        subject = "Confirmation: Your Personal Voice Sharing Slot"
        body = f"""
<p>Hi {_html(requester.name, 'Student')},</p>
<p>Your Personal Voice sharing slot for "<strong>{_html(requester.subject, 'Your Topic')}</strong>" has been scheduled!</p>
<p><strong>Date:</strong> {self.format_date(booking.date)}</p>
<p><strong>Time:</strong> {self.format_time(booking.start)} - {self.format_time(booking.end)}</p>
<p>Please prepare your sharing and ensure any slides are ready and accessible via the link you provided.</p>
<p>Further details regarding reporting time will be sent in a reminder email the day before your scheduled slot.</p>
<p>Thank you for volunteering!</p>
{FOOTER}
"""
        return subject, body

    def reminder(self, requester, booking, reporting_time: datetime) -> Message:
        formatted_date = self.format_date(booking.date)
        subject = f"Reminder: Your Personal Voice Sharing Tomorrow ({formatted_date})"
        body = f"""
<p>Hi {_html(requester.name, 'Student')},</p>
<p>This is a reminder about your Personal Voice sharing session tomorrow, <strong>{formatted_date}</strong>, starting at <strong>{self.format_time(booking.start)}</strong>.</p>
<p><strong>Please report to {self.config.REPORTING_LOCATION} by {self.format_time(reporting_time)}</strong> to set up and prepare.</p>
<p>Ensure your slides (if any) are accessible via the link you provided earlier.</p>
<p>We look forward to your sharing!</p>
{FOOTER}
"""
        return subject, body

    def reschedule(self, requester, old_date: date, old_start: datetime, booking) -> Message:
        subject = "Important Update: Your Personal Voice Sharing Slot Rescheduled"
        body = f"""
<p>Hi {_html(requester.name, 'Student')},</p>
<p>Please note that your previously scheduled Personal Voice sharing slot for "<strong>{_html(requester.subject, 'Your Topic')}</strong>" on <strong>{self.format_date(old_date)} at {self.format_time(old_start)}</strong> has been rescheduled due to changes in the assembly programme.</p>
<p>Your new slot is:</p>
<p><strong>Date:</strong> {self.format_date(booking.date)}</p>
<p><strong>Time:</strong> {self.format_time(booking.start)} - {self.format_time(booking.end)}</p>
<p>We apologize for any inconvenience this may cause. Please prepare for the new date and time.</p>
<p>A reminder email with reporting details will be sent the day before your new scheduled slot.</p>
<p>Thank you for your understanding.</p>
{FOOTER}
"""
        return subject, body

    def cancellation(self, requester, old_date: date, old_start: datetime) -> Message:
        subject = "Important Update: Your Personal Voice Sharing Slot Cancelled"
        body = f"""
<p>Hi {_html(requester.name, 'Student')},</p>
<p>Due to changes in the Assembly programme, your Personal Voice sharing slot for "{_html(requester.subject, 'Your Topic')}" (originally scheduled for {self.format_date(old_date)} starting around {self.format_time(old_start)}) had to be removed.</p>
<p>Unfortunately, the system could not automatically find a replacement slot at this time.</p>
<p>Please contact the teacher-in-charge to discuss manual rescheduling options if you still wish to present.</p>
<p>We apologize for the inconvenience.</p>
{FOOTER}
"""
        return subject, body

    def not_found(self, requester) -> Message:
        subject = "Unable to Schedule Your Personal Voice Sharing"
        body = f"""
<p>Hi {_html(requester.name, 'Student')},</p>
<p>We received your request to share on "{_html(requester.subject, 'Your Topic')}", but unfortunately, we couldn't automatically find a suitable {requester.time_requested}-minute slot in the upcoming Assembly schedule.</p>
<p>Please check with the teacher-in-charge for manual scheduling options.</p>
<p>Thank you.</p>
{FOOTER}
"""
        return subject, body

    def admin_alert(self, title: str, details: str) -> Message:
        subject = f"PV Script {title}"
        body = f"<p>{html.escape(details)}</p>\n<p>Check the scheduler logs for details.</p>"
        return subject, body
