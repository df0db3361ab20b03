"""Stub email, SMS and calendar senders."""

import logging
import random
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)


class StubNotifier:
    """
    Pretends to deliver notifications.

    Every send is logged and reported successful with probability
    `success_rate`. Pass a seeded `random.Random` for repeatable results.
    """

    def __init__(self, success_rate: float = 0.9, rng: Optional[random.Random] = None):
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    def _attempt(self) -> bool:
        return self.rng.random() < self.success_rate

    def send_email(self, to: str, subject: str, body: str) -> bool:
        logger.info("Sending email to %s: %s", to, subject)
        logger.debug("Email body:\n%s", body)
        return self._attempt()

    def send_sms(self, to: str, body: str) -> bool:
        logger.info("Sending SMS to %s: %s", to, body)
        return self._attempt()

    def send_calendar_invite(
        self, to: str, summary: str, description: str, start_date: date
    ) -> bool:
        logger.info("Generating calendar invite for %s on %s: %s", to, start_date, summary)
        logger.debug("Invite description:\n%s", description)
        return self._attempt()
