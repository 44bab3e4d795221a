# scripts/consumer.py
"""Escucha los eventos de órdenes y tracking para inspección manual.

ROUTING_KEYS (coma separada) permite filtrar, ej.:
    ROUTING_KEYS="order.tracking.updated" python scripts/consumer.py
"""
import os, json, pika

RABBIT_HOST   = os.getenv("RABBIT_HOST", "127.0.0.1")
RABBIT_PORT   = int(os.getenv("RABBIT_PORT", "5672"))
RABBIT_USER   = os.getenv("RABBIT_USER", "guest")
RABBIT_PASS   = os.getenv("RABBIT_PASS", "guest")
RABBIT_VHOST  = os.getenv("RABBIT_VHOST", "/")
EXCHANGE      = os.getenv("RABBIT_EXCHANGE", "order_events")

DEFAULT_KEYS = ["order.created", "order.status.updated", "order.tracking.updated"]
BIND_KEYS = [k.strip() for k in os.getenv("ROUTING_KEYS", "").split(",") if k.strip()] or DEFAULT_KEYS


def describe(routing_key: str, body: bytes) -> str:
    """Línea legible por evento; si el body no es JSON se muestra crudo."""
    try:
        payload = json.loads(body.decode("utf-8"))
    except ValueError:
        return f"[x] {routing_key} {body!r}"

    order_id = payload.get("order_id", "?")
    if routing_key == "order.tracking.updated":
        number = payload.get("tracking_number") or "-"
        link = payload.get("tracking_link") or "-"
        return f"[tracking] {order_id} número={number} link={link}"
    if routing_key == "order.status.updated":
        return f"[status] {order_id} -> {payload.get('new_status')} (v{payload.get('version')})"
    return f"[x] {routing_key} {json.dumps(payload, ensure_ascii=False)}"


def main():
    creds = pika.PlainCredentials(RABBIT_USER, RABBIT_PASS)
    params = pika.ConnectionParameters(
        host=RABBIT_HOST, port=RABBIT_PORT, virtual_host=RABBIT_VHOST,
        credentials=creds, heartbeat=30, blocked_connection_timeout=10
    )
    conn = pika.BlockingConnection(params)
    ch = conn.channel()
    ch.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)

    # Cola exclusiva y autodelete para inspección
    q = ch.queue_declare(queue="", exclusive=True, auto_delete=True)
    qname = q.method.queue

    for key in BIND_KEYS:
        ch.queue_bind(exchange=EXCHANGE, queue=qname, routing_key=key)

    print(f"Escuchando {BIND_KEYS} en {EXCHANGE} (cola {qname}). Ctrl+C para salir.")
    def on_msg(ch_, method, props, body):
        print(describe(method.routing_key, body))
        ch_.basic_ack(delivery_tag=method.delivery_tag)

    ch.basic_consume(queue=qname, on_message_callback=on_msg, auto_ack=False)
    try:
        ch.start_consuming()
    except KeyboardInterrupt:
        print("\nCerrando…")
        ch.stop_consuming()
        conn.close()

if __name__ == "__main__":
    main()
