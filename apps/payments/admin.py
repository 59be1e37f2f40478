from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('invoice_number', 'submission', 'user', 'amount', 'currency', 'status', 'paid_at')
    list_filter = ('status', 'currency', 'payment_method')
    search_fields = ('invoice_number', 'transaction_id', 'user__email')
    readonly_fields = ('status', 'invoice_number', 'paid_at', 'refunded_at', 'created_at', 'updated_at')

    def has_delete_permission(self, request, obj=None):
        return False
