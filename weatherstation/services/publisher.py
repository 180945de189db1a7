from __future__ import annotations

import logging
from typing import Callable, Optional

import paho.mqtt.client as mqtt

from ..core.config import Settings

logger = logging.getLogger(__name__)


class PublisherError(Exception):
    """Broker connection could not be established."""


def topic_for(channel: str, field: int, write_key: str) -> str:
    return f"channels/{channel}/publish/fields/field{field}/{write_key}"


def _make_client(settings: Settings) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        client_id=settings.identity,
        clean_session=True,
        protocol=mqtt.MQTTv311,
    )


class TelemetryPublisher:
    """
    Long-lived MQTT session to the telemetry broker.
    Responsible for: connect, per-field publish. Keep-alive and
    reconnection are left to paho's network loop thread.
    """

    def __init__(self, settings: Settings, client_factory: Callable[[Settings], mqtt.Client] = _make_client):
        self._settings = settings
        self._client_factory = client_factory
        self._client: Optional[mqtt.Client] = None

    def connect(self) -> None:
        s = self._settings
        client = self._client_factory(s)

        client.username_pw_set(s.username, s.password)
        client.enable_logger(logging.getLogger("paho"))
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect

        logger.info("Connecting to %s:%d (keepalive=%ds)", s.host, s.port, s.keepalive)
        try:
            rc = client.connect(s.host, s.port, keepalive=s.keepalive)
        except (OSError, ValueError) as e:
            raise PublisherError(f"Unable to connect to {s.host}:{s.port}: {e}") from e
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublisherError(f"Unable to connect to {s.host}:{s.port}: {mqtt.error_string(rc)}")

        rc = client.loop_start()
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublisherError(f"Unable to start loop: {rc}")

        self._client = client

    def close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.loop_stop()
            self._client.disconnect()
        except Exception as e:
            logger.warning("Disconnect error: %s", e)
        self._client = None

    def topic(self, field: int) -> str:
        return topic_for(self._settings.channel, field, self._settings.writeapikey)

    def publish(self, field: int, payload: str) -> int:
        """Send one field value (QoS 0, not retained). Returns the paho result code."""
        if self._client is None:
            raise PublisherError("Publisher is not connected")

        info = self._client.publish(self.topic(field), payload, qos=0, retain=False)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning("Publish field%d=%s failed: rc=%d (%s)", field, payload, info.rc, mqtt.error_string(info.rc))
        return info.rc

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code.is_failure:
            logger.error("Broker refused connection: %s", reason_code)
        else:
            logger.info("Connected to broker")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        logger.warning("Disconnected from broker (%s)", reason_code)
