from rest_framework import serializers


class ContactSerializer(serializers.Serializer):
    email = serializers.EmailField()
    firstName = serializers.CharField(required=False, allow_blank=True)
    lastName = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    leadSource = serializers.CharField(required=False, allow_blank=True)
    quizResults = serializers.JSONField(required=False)
    purchaseAmount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    purchaseType = serializers.CharField(required=False, allow_blank=True)


class DealSerializer(serializers.Serializer):
    email = serializers.EmailField()
    dealName = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    dealStage = serializers.CharField(required=False, allow_blank=True)
    dealType = serializers.CharField(required=False, allow_blank=True)


class RecipientSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(required=False, allow_blank=True, default='')


class PdfStackEmailSerializer(RecipientSerializer):
    archetype = serializers.CharField()
    pdfStack = serializers.CharField()
    battlePlan = serializers.CharField(required=False, allow_blank=True, default='')
