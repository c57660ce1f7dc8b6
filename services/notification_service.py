import logging

import requests

from services.event_types import CHANGE_ADDED, CHANGE_UPDATED

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
SMS_TIMEOUT_SECONDS = 10


class SmsSender:
    """Best-effort SMS over the Twilio REST API. Failures are logged, never raised."""

    def __init__(self, account_sid=None, auth_token=None, from_number=None, enabled=True, session=None):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.enabled = enabled
        self.session = session or requests.Session()

    @property
    def configured(self):
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, destination, message):
        if not destination or not destination.strip():
            logger.error("Phone number is empty. Cannot send SMS.")
            return False
        if not self.enabled:
            logger.info("SMS disabled; message to %s not sent", destination)
            return False
        if not self.configured:
            logger.warning("SMS credentials missing; message to %s not sent", destination)
            return False

        try:
            resp = self.session.post(
                TWILIO_MESSAGES_URL.format(sid=self.account_sid),
                data={"To": destination.strip(), "From": self.from_number, "Body": message},
                auth=(self.account_sid, self.auth_token),
                timeout=SMS_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to send SMS to %s: %s", destination, e)
            return False
        logger.info("SMS sent successfully to %s", destination)
        return True


def build_event_message(change):
    event = change.event
    if change.kind == CHANGE_UPDATED:
        return f"Your event '{event.name}' has been updated."
    time_info = f" at {event.time}" if event.time else ""
    return f"A new event '{event.name}' has been added to your calendar for {event.date}{time_info}."


class EventNotifier:
    """Event service observer that texts the owner about added and updated events."""

    def __init__(self, store, sender):
        self.store = store
        self.sender = sender

    def __call__(self, change):
        if change.kind not in (CHANGE_ADDED, CHANGE_UPDATED) or change.event is None:
            return False
        user = self.store.get_user(change.user_id)
        if user is None or not user.sms_enabled or not user.phone:
            return False
        return self.sender.send(user.phone, build_event_message(change))
