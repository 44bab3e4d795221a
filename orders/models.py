import logging

from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .publisher import publish_order_status_updated
from .signals import order_status_changed
from .validators import VersionConflict, validate_status_transition

logger = logging.getLogger(__name__)


class OrderStatus(models.TextChoices):
    PENDING = "pending", _("Pending payment")
    PROCESSING = "processing", _("Processing")
    ON_HOLD = "on-hold", _("On hold")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")
    REFUNDED = "refunded", _("Refunded")
    FAILED = "failed", _("Failed")


class Order(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    status = models.CharField(max_length=32, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    email = models.EmailField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)
    version = models.IntegerField(default=0)  # control optimista

    def __str__(self):
        return f"{self.id}:{self.status}:{self.version}"

    def update_status(self, new_status: str, note: str = "", meta: dict | None = None) -> str:
        """Cambia el estado y dispara los hooks. Retorna el estado anterior.

        Las excepciones de los receptores de ``order_status_changed`` se
        propagan: el cambio ya quedó guardado cuando eso ocurre.
        """
        old_status = self.set_status(new_status, note=note)
        self.notify_status_changed(old_status, meta=meta)
        return old_status

    def set_status(self, new_status: str, note: str = "", expected_version: int | None = None) -> str:
        """
        Persiste el nuevo estado en una transacción corta (SELECT ... FOR UPDATE + UPDATE).
        - expected_version activa el control optimista.
        - Lanza InvalidStatus, VersionConflict u Order.DoesNotExist.
        """
        with transaction.atomic():
            q = Order.objects.select_for_update().filter(pk=self.pk)
            if expected_version is not None:
                q = q.filter(version=expected_version)
            row = q.first()

            if row is None:
                if expected_version is not None and Order.objects.filter(pk=self.pk).exists():
                    raise VersionConflict(f"La orden {self.pk} ya no está en la versión {expected_version}")
                raise Order.DoesNotExist(f"Orden {self.pk} no encontrada")

            old_status = row.status
            validate_status_transition(old_status, new_status)

            Order.objects.filter(pk=row.pk).update(
                status=new_status,
                version=models.F("version") + 1,
                updated_at=timezone.now(),
            )
            if note:
                OrderNote.objects.create(order_id=row.pk, note=str(note))

        self.refresh_from_db(fields=["status", "version", "updated_at"])
        return old_status

    def notify_status_changed(self, old_status: str, meta: dict | None = None) -> None:
        """Publica el evento y avisa a los plugins (solo si el estado cambió)."""
        publish_order_status_updated(self.id, self.status, self.version, meta=meta)
        if old_status == self.status:
            return
        logger.info("Orden %s: %s -> %s", self.id, old_status, self.status)
        order_status_changed.send(
            sender=Order,
            order=self,
            old_status=old_status,
            new_status=self.status,
        )


class OrderNote(models.Model):
    """Nota de auditoría asociada a la orden."""

    order = models.ForeignKey(Order, related_name="notes", on_delete=models.CASCADE)
    note = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.order_id}: {self.note}"


class OrderMeta(models.Model):
    """Metadatos clave/valor que los plugins guardan sobre la orden."""

    order = models.ForeignKey(Order, related_name="meta", on_delete=models.CASCADE)
    key = models.CharField(max_length=255)
    value = models.TextField(blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["order", "key"], name="orders_meta_unique_key"),
        ]

    def __str__(self):
        return f"{self.order_id}:{self.key}"
