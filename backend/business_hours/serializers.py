from rest_framework import serializers

from settings.models import FulfillmentMode


class AvailabilityCheckSerializer(serializers.Serializer):
    """Query parameters for checking availability at a specific date/time"""
    date = serializers.DateField(required=False, input_formats=['%Y-%m-%d'])
    time = serializers.TimeField(required=False, input_formats=['%H:%M', '%H:%M:%S'])
    mode = serializers.ChoiceField(choices=FulfillmentMode.choices, required=False)

    def validate(self, attrs):
        if ('date' in attrs) != ('time' in attrs):
            raise serializers.ValidationError("Provide both date and time, or neither.")
        return attrs


class AvailabilitySerializer(serializers.Serializer):
    date = serializers.DateField()
    time = serializers.TimeField(format='%H:%M')
    is_open = serializers.BooleanField()
    store_reason = serializers.CharField()
    modes = serializers.DictField()
