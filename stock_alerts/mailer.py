import logging

from botocore.exceptions import BotoCoreError, ClientError

from stock_alerts.errors import DeliveryError

logger = logging.getLogger(__name__)


class SesMailer:
    """Envío por Amazon SES: una sola llamada para todos los destinatarios."""

    def __init__(self, ses_client, sender):
        self.ses = ses_client
        self.sender = sender

    def send(self, subject, text, recipients, html=None):
        body = {'Text': {'Data': text, 'Charset': 'UTF-8'}}
        if html:
            body['Html'] = {'Data': html, 'Charset': 'UTF-8'}
        try:
            resp = self.ses.send_email(
                Source=self.sender,
                Destination={'ToAddresses': list(recipients)},
                Message={
                    'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                    'Body': body,
                },
            )
        except ClientError as e:
            message = e.response.get('Error', {}).get('Message') or str(e)
            raise DeliveryError(message) from e
        except BotoCoreError as e:
            raise DeliveryError(str(e)) from e
        message_id = resp.get('MessageId', '')
        logger.info('SES MessageId=%s destinatarios=%d', message_id, len(recipients))
        return message_id
