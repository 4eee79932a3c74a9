from django.db import models
from django.conf import settings


class Lead(models.Model):
    """A visitor who left an email on the results page, before paying."""
    email = models.EmailField(unique=True)
    archetype = models.CharField(max_length=200, blank=True)
    pdf_stack = models.CharField(max_length=200, blank=True)
    plan = models.TextField(blank=True)
    captured_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Lead {self.email} ({self.pdf_stack or 'no stack'})"


class Payment(models.Model):
    PLAN_CHOICES = [
        ("community", "Fusion Community"),
        ("consult", "1-on-1 Consult"),
    ]

    stripe_payment_intent_id = models.CharField(max_length=255, unique=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                             related_name="payments")
    email = models.EmailField()
    plan = models.CharField(max_length=20, choices=PLAN_CHOICES)
    amount = models.PositiveIntegerField()  # cents
    currency = models.CharField(max_length=10, default="usd")
    status = models.CharField(max_length=50)  # mirrors the Stripe PaymentIntent status

    # set once, the first time this payment unlocked the dashboard
    access_granted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.stripe_payment_intent_id} {self.plan} {self.status}"
