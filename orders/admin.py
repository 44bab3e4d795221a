import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from .models import Order, OrderMeta, OrderNote
from .signals import order_admin_form_fields, process_order_meta
from .validators import HookError, InvalidStatus

logger = logging.getLogger(__name__)


class OrderNoteInline(admin.TabularInline):
    model = OrderNote
    extra = 0
    fields = ("note", "created_at")
    readonly_fields = ("note", "created_at")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "status", "email", "updated_at", "version")
    list_filter = ("status",)
    search_fields = ("id", "email")
    readonly_fields = ("updated_at", "version")
    inlines = [OrderNoteInline]

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("id", *self.readonly_fields)
        return self.readonly_fields

    def get_form(self, request, obj=None, change=False, **kwargs):
        # Los plugins aportan campos extra que no son del modelo
        extra_fields = {}
        for _receiver, fields in order_admin_form_fields.send(sender=Order, order=obj):
            extra_fields.update(fields or {})
        if extra_fields:
            kwargs["form"] = type(self.form.__name__, (self.form,), extra_fields)
        return super().get_form(request, obj, change=change, **kwargs)

    def save_model(self, request, obj, form, change):
        new_status = obj.status
        if change and "status" in form.changed_data:
            # El cambio de estado pasa por update_status para que corran los hooks
            obj.status = form.initial["status"]
        super().save_model(request, obj, form, change)
        try:
            process_order_meta.send(sender=Order, order=obj, data=form.cleaned_data)
        except HookError as e:
            logger.warning("Metadatos de la orden %s no guardados: %s", obj.pk, e)
            self.message_user(request, str(e), messages.WARNING)

        if obj.status != new_status:
            try:
                obj.update_status(new_status, note=_("Order status changed by administrator."))
            except (InvalidStatus, HookError) as e:
                logger.warning("Cambio de estado desde admin para %s: %s", obj.pk, e)
                self.message_user(request, str(e), messages.WARNING)


@admin.register(OrderMeta)
class OrderMetaAdmin(admin.ModelAdmin):
    list_display = ("order", "key", "value")
    search_fields = ("order__id", "key")
