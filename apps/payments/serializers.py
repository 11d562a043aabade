from rest_framework import serializers

from .models import PaymentGateway


class PaymentGatewaySerializer(serializers.ModelSerializer):
    """Gateway credentials; secrets are accepted but never returned."""

    has_webhook_secret = serializers.SerializerMethodField()

    class Meta:
        model = PaymentGateway
        fields = [
            'id',
            'name',
            'type',
            'key_id',
            'key_secret',
            'webhook_secret',
            'has_webhook_secret',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'key_secret': {'write_only': True},
            'webhook_secret': {'write_only': True, 'required': False},
        }

    def get_has_webhook_secret(self, obj):
        return bool(obj.webhook_secret)


class CreateSubscriptionOrderSerializer(serializers.Serializer):
    package = serializers.UUIDField()


class CreateFoodOrderSerializer(serializers.Serializer):
    order = serializers.UUIDField()


class PaymentVerificationSerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField(max_length=100)
    razorpay_payment_id = serializers.CharField(max_length=100)
    razorpay_signature = serializers.CharField(max_length=256)


class VerifySubscriptionPaymentSerializer(PaymentVerificationSerializer):
    subscription = serializers.UUIDField()


class VerifyFoodPaymentSerializer(PaymentVerificationSerializer):
    order = serializers.UUIDField()
