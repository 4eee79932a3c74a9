from django.contrib import admin
from .models import Lead, Payment


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ['email', 'archetype', 'pdf_stack', 'captured_at']
    list_filter = ['pdf_stack', 'captured_at']
    search_fields = ['email']
    readonly_fields = ['captured_at', 'updated_at']


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['stripe_payment_intent_id', 'email', 'plan', 'amount', 'status', 'access_granted_at']
    list_filter = ['plan', 'status']
    search_fields = ['email', 'stripe_payment_intent_id']
    readonly_fields = ['created_at', 'updated_at', 'access_granted_at']

    def has_add_permission(self, request):
        return False  # rows come from Stripe, not the admin
