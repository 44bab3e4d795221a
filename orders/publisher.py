# orders/publisher.py
import os
import json
import logging

import pika

logger = logging.getLogger(__name__)

# Se leen SIEMPRE desde variables de entorno (nada hardcodeado)
RABBIT_HOST   = os.getenv("RABBIT_HOST")                # ej: 52.87.186.136
RABBIT_PORT   = int(os.getenv("RABBIT_PORT", "5672"))
RABBIT_VHOST  = os.getenv("RABBIT_VHOST", "/")
RABBIT_USER   = os.getenv("RABBIT_USER", "monitoring_user")
RABBIT_PASS   = os.getenv("RABBIT_PASS", "isis2503")
EXCHANGE      = os.getenv("RABBIT_EXCHANGE", "order_events")

def _connection_parameters() -> pika.ConnectionParameters:
    """Devuelve parámetros con timeouts y reintentos cortos.
    No bloquea la request si el broker está caído o lejos."""
    return pika.ConnectionParameters(
        host=RABBIT_HOST,
        port=RABBIT_PORT,
        virtual_host=RABBIT_VHOST,
        credentials=pika.PlainCredentials(RABBIT_USER, RABBIT_PASS),
        heartbeat=30,
        blocked_connection_timeout=5,
        socket_timeout=5,
        connection_attempts=3,
        retry_delay=2.0,
    )

def _publish(routing_key: str, payload: dict) -> bool:
    """Publica sin reventar la request si el broker falla.
    Retorna True solo si el mensaje salió."""
    if not RABBIT_HOST:
        # No hay host configurado → no publicamos, pero tampoco rompemos
        logger.debug("[publisher] RABBIT_HOST no definido; evento %s omitido", routing_key)
        return False
    conn = None
    try:
        conn = pika.BlockingConnection(_connection_parameters())
        ch = conn.channel()
        ch.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)
        ch.basic_publish(
            exchange=EXCHANGE,
            routing_key=routing_key,
            body=json.dumps(payload).encode("utf-8"),
            properties=pika.BasicProperties(
                content_type="application/json",
                delivery_mode=2,  # persistente si la cola es durable
            ),
        )
        return True
    except Exception as e:
        # Loguea y sigue; evita que el endpoint de Django se bloquee/falle
        logger.warning("[publisher] Error publicando %s: %s", routing_key, e)
        return False
    finally:
        if conn is not None and conn.is_open:
            conn.close()

def publish_order_created(order_id: str, status: str) -> bool:
    return _publish("order.created", {"order_id": order_id, "status": status})

def publish_order_status_updated(order_id: str, status: str, version: int, meta: dict | None = None) -> bool:
    payload = {"order_id": order_id, "new_status": status, "version": int(version)}
    if meta:
        payload["meta"] = meta
    return _publish("order.status.updated", payload)

def publish_order_tracking_updated(order_id: str, tracking_number: str | None, tracking_link: str | None) -> bool:
    payload = {
        "order_id": order_id,
        "tracking_number": tracking_number,
        "tracking_link": tracking_link,
    }
    return _publish("order.tracking.updated", payload)
