"""
Adaptateur SMTP: centralise l'envoi des e-mails (factures, notifications admin, relais contact).
- Une seule tentative par appel, pas de retry (la politique appartient à l'appelant).
- Timeout borné sur la socket SMTP (Settings.outbound_timeout).
"""
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Protocol

from storefront.config import Settings
from storefront.errors import DeliveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryReceipt:
    recipient: str
    subject: str
    message_id: str


class Mailer(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> DeliveryReceipt: ...


# module storefront.notifications.mailer
class SmtpMailer:
    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.use_ssl = settings.smtp_use_ssl
        self.user = settings.email_user
        self.password = settings.email_pass
        self.timeout = settings.outbound_timeout

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        client = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            client.starttls()
        except BaseException:
            # La socket est ouverte mais send() n'est pas encore dans son bloc with
            client.close()
            raise
        return client

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.user
        msg["To"] = recipient
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        msg.set_content(body)
        return msg

    def send(self, recipient: str, subject: str, body: str) -> DeliveryReceipt:
        """
        Envoie un message texte à un destinataire.
        - Retour: DeliveryReceipt si le serveur SMTP a accepté le message.
        - Erreurs: DeliveryError avec le diagnostic du transport
          (authentification, réseau, destinataire refusé).
        """
        msg = self.build_message(recipient, subject, body)
        try:
            with self._connect() as client:
                if self.user:
                    client.login(self.user, self.password)
                client.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error("mailer.send auth failed host=%s user=%s", self.host, self.user)
            raise DeliveryError(f"SMTP authentication failed: {e.smtp_code}") from e
        except smtplib.SMTPRecipientsRefused as e:
            logger.error("mailer.send recipient refused to=%s", recipient)
            raise DeliveryError(f"Recipient refused: {recipient}") from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error("mailer.send failed to=%s error=%s", recipient, e)
            raise DeliveryError(f"Mail transport failure: {e}") from e
        logger.info("mailer.send ok to=%s subject=%r", recipient, subject)
        return DeliveryReceipt(recipient=recipient, subject=subject, message_id=msg["Message-ID"])
