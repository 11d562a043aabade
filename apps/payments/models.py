from django.db import models
import uuid


class GatewayType(models.TextChoices):
    RAZORPAY = 'RAZORPAY', 'Razorpay'


class PaymentGateway(models.Model):
    """Credentials for an online payment provider."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=20, choices=GatewayType.choices, default=GatewayType.RAZORPAY)
    key_id = models.CharField(max_length=200)
    key_secret = models.CharField(max_length=200)
    webhook_secret = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_gateways'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.type})"

    @classmethod
    def get_active(cls, gateway_type=GatewayType.RAZORPAY):
        return cls.objects.filter(type=gateway_type, is_active=True).order_by('-updated_at').first()
