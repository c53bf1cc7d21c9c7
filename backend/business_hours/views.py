from rest_framework.response import Response

from core_backend.base import PublicAPIView
from settings.models import FulfillmentMode

from .serializers import AvailabilityCheckSerializer, AvailabilitySerializer
from .services import AvailabilityService


class AvailabilityView(PublicAPIView):
    """
    Store and mode availability for a merchant.

    Query params (all optional):
    - date, time: target on the merchant's wall clock; defaults to now
    - mode: restrict the mode report to a single fulfillment mode
    """

    def get(self, request, merchant_code):
        params = AvailabilityCheckSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        service = AvailabilityService(request.tenant)
        if 'date' in params.validated_data:
            check_date = params.validated_data['date']
            check_time = params.validated_data['time']
        else:
            check_date, check_time = service.local_now()

        modes = [params.validated_data['mode']] if 'mode' in params.validated_data else FulfillmentMode.values
        special = service.get_special_hour(check_date)
        store = service.is_store_open(check_date, check_time, special_hour=special)
        mode_report = {}
        for mode in modes:
            status = service.is_mode_available(mode, check_date, check_time, special_hour=special)
            mode_report[mode] = {'available': status.is_available, 'reason': status.reason}

        payload = AvailabilitySerializer({
            'date': check_date,
            'time': check_time,
            'is_open': store.is_open,
            'store_reason': store.reason,
            'modes': mode_report,
        }).data
        return Response({'success': True, 'data': payload})
