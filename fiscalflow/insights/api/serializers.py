from rest_framework import serializers


class BudgetForecastRequestSerializer(serializers.Serializer):
    historicalSpendingData = serializers.CharField()  # noqa: N815
    contractObligations = serializers.CharField(allow_blank=True)  # noqa: N815


class QuoteSerializer(serializers.Serializer):
    vendor = serializers.CharField()
    description = serializers.CharField()
    price = serializers.FloatField(min_value=0)
    terms = serializers.CharField(allow_blank=True)


class CapexComparisonRequestSerializer(serializers.Serializer):
    quotes = QuoteSerializer(many=True, allow_empty=False)
    criteria = serializers.CharField()
