from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsFnbManager

from .serializers import JobResultSerializer
from .services import send_rating_requests, send_attendance_requests, send_expiry_reminders


@extend_schema(request=None, responses={200: JobResultSerializer})
@api_view(['POST'])
@permission_classes([IsFnbManager])
def rating_requests(request):
    """Notify students who ate 25-30 minutes ago. Cron: every 5 minutes."""
    count = send_rating_requests()
    return Response({'message': f'Sent {count} rating request notifications', 'count': count})


@extend_schema(request=None, responses={200: JobResultSerializer})
@api_view(['POST'])
@permission_classes([IsFnbManager])
def attendance_requests(request):
    """Ask subscribers to confirm tomorrow's meals. Cron: daily 14:00."""
    count = send_attendance_requests()
    return Response({'message': f'Sent {count} attendance confirmation notifications', 'count': count})


@extend_schema(request=None, responses={200: JobResultSerializer})
@api_view(['POST'])
@permission_classes([IsFnbManager])
def expiry_reminders(request):
    """Remind subscribers whose subscription ends soon. Cron: daily 09:00."""
    count = send_expiry_reminders()
    return Response({'message': f'Sent {count} expiry reminder notifications', 'count': count})
