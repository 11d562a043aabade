"""
Student mobile app API.

Every endpoint except OTP login authenticates with a student token
(StudentJWTAuthentication); staff tokens are rejected.
"""

from django.db.models import Count
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from apps.meals.services import (
    AlreadyRatedError,
    AttendanceClosedError,
    MealDateMismatchError,
    MealPlanNotFoundError,
    rate_meal,
    set_intent,
    set_intents,
)
from apps.mess.models import MenuItem, MessFacility, Order, Package
from apps.mess.serializers import (
    MenuItemSerializer,
    MessFacilityMinimalSerializer,
    OrderCreateSerializer,
    OrderSerializer,
)
from apps.mess.services import MessServiceError, create_order, render_qr_png
from apps.notifications.serializers import NotificationSerializer, PushTokenInputSerializer
from apps.notifications.services import (
    NotificationNotFoundError,
    inbox,
    mark_read,
    register_push_token,
    unread_count,
)
from apps.students.authentication import StudentJWTAuthentication
from apps.students.models import Student
from apps.students.permissions import IsStudent
from apps.students.services import (
    MissingMobileNumberError,
    OTPError,
    SmsDeliveryError,
    StudentNotFoundError,
    send_otp as send_otp_code,
    verify_otp as verify_otp_code,
)
from apps.systemconfig.models import MealAttendanceSettings
from apps.systemconfig.serializers import MealAttendanceSettingsSerializer
from apps.systemconfig.services import get_meal_times
from apps.uploads.images import InvalidImageError, delete_image, save_base64_image

from .serializers import (
    SendOTPSerializer,
    VerifyOTPSerializer,
    StudentProfileSerializer,
    ProfileUpdateSerializer,
    PhotoDataSerializer,
    AttendanceIntentSerializer,
    BulkAttendanceSerializer,
    MealRatingInputSerializer,
    WeeklyDaySerializer,
    TodayMealSerializer,
    MenuQuerySerializer,
    MobilePackageSerializer,
    MobileSubscriptionSerializer,
)
from .services import weekly_plan, today_meals

PHOTO_FOLDER = 'student-photos'


def _profile(student):
    annotated = (
        Student.objects
        .select_related('mess_facility')
        .annotate(
            attendance_count=Count('attendances', distinct=True),
            rating_count=Count('meal_ratings', distinct=True),
        )
        .get(pk=student.pk)
    )
    return StudentProfileSerializer(annotated).data


# =============================================================================
# Auth
# =============================================================================

@extend_schema(request=SendOTPSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def send_otp(request):
    """Text a login OTP to the student's registered mobile number."""
    serializer = SendOTPSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        send_otp_code(serializer.validated_data['identifier'])
    except StudentNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except MissingMobileNumberError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except SmsDeliveryError as e:
        return Response({'error': str(e.detail)}, status=e.status_code)

    return Response({'message': 'OTP sent successfully to your registered mobile number'})


@extend_schema(request=VerifyOTPSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def verify_otp(request):
    """Exchange a valid OTP for a long-lived student token."""
    serializer = VerifyOTPSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        student, token = verify_otp_code(
            serializer.validated_data['register_number'],
            serializer.validated_data['otp'],
        )
    except OTPError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'token': str(token),
        'user': {
            'id': student.id,
            'name': student.name,
            'register_number': student.register_number,
            'mobile_number': student.mobile_number,
        },
    })


# =============================================================================
# Profile
# =============================================================================

@extend_schema(request=ProfileUpdateSerializer, responses={200: StudentProfileSerializer}, tags=['mobile'])
@api_view(['GET', 'PUT'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def profile(request):
    """Own profile with attendance and rating counts; PUT edits contact fields."""
    if request.method == 'PUT':
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
    return Response(_profile(request.user))


@extend_schema(request=PhotoDataSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def upload_photo(request):
    serializer = PhotoDataSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    student = request.user
    try:
        url = save_base64_image(serializer.validated_data['photo_data'], PHOTO_FOLDER)
    except InvalidImageError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    delete_image(student.photo_url)
    student.photo_url = url
    student.save(update_fields=['photo_url', 'updated_at'])
    return Response({'photo_url': url, 'message': 'Photo uploaded successfully'})


# =============================================================================
# Meals
# =============================================================================

@extend_schema(responses={200: WeeklyDaySerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def weekly_meals(request):
    """This week's menu for the student's subscription, Monday first."""
    return Response(WeeklyDaySerializer(weekly_plan(request.user), many=True).data)


@extend_schema(responses={200: TodayMealSerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def todays_meals(request):
    return Response(TodayMealSerializer(today_meals(request.user), many=True).data)


@extend_schema(request=AttendanceIntentSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def meal_attendance(request):
    """Say whether the student will attend one meal."""
    serializer = AttendanceIntentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        set_intent(
            student=request.user,
            meal_plan_id=data['meal_plan'],
            will_attend=data['will_attend'],
            meal_date=data.get('meal_date'),
        )
    except MealPlanNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except MealDateMismatchError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Attendance preference updated successfully'})


@extend_schema(request=BulkAttendanceSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def set_attendance(request):
    """Bulk attendance marking; closed after the configured cut-off time."""
    serializer = BulkAttendanceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        set_intents(student=request.user, entries=serializer.validated_data['attendance'])
    except (AttendanceClosedError, MealDateMismatchError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except MealPlanNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({'message': 'Meal attendance preferences updated successfully'})


@extend_schema(request=MealRatingInputSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def rate(request):
    serializer = MealRatingInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        rate_meal(
            student=request.user,
            meal_plan_id=data['meal_plan'],
            rating=data['rating'],
            comment=data['comment'],
            meal_date=data.get('meal_date'),
        )
    except MealPlanNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (AlreadyRatedError, MealDateMismatchError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Rating submitted successfully'}, status=status.HTTP_201_CREATED)


@extend_schema(responses={200: MealAttendanceSettingsSerializer}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def attendance_settings(request):
    return Response(MealAttendanceSettingsSerializer(MealAttendanceSettings.load()).data)


@extend_schema(tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def meal_times(request):
    return Response(get_meal_times())


# =============================================================================
# Ordering
# =============================================================================

@extend_schema(responses={200: MessFacilityMinimalSerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def mess_facilities(request):
    facilities = MessFacility.objects.filter(is_active=True).order_by('name')
    return Response(MessFacilityMinimalSerializer(facilities, many=True).data)


@extend_schema(parameters=[MenuQuerySerializer], responses={200: MenuItemSerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def menu_items(request):
    """Available menu items at a facility (?facility=<id>&meal_type=LUNCH)."""
    query = MenuQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    params = query.validated_data

    items = MenuItem.objects.filter(mess_facility_id=params['facility'], is_available=True)
    if 'meal_type' in params:
        items = items.filter(meal_type=params['meal_type'])
    return Response(MenuItemSerializer(items.select_related('mess_facility').order_by('name'), many=True).data)


def _student_orders(student):
    return (
        Order.objects
        .filter(student=student)
        .select_related('student', 'mess_facility')
        .prefetch_related('items__menu_item', 'qr_codes')
    )


@extend_schema(request=OrderCreateSerializer, responses={200: OrderSerializer(many=True), 201: OrderSerializer}, tags=['mobile'])
@api_view(['GET', 'POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def orders(request):
    """
    GET: the student's order history, newest first.
    POST: place an order; totals come from menu prices and a QR code is issued.
    """
    if request.method == 'GET':
        return Response(OrderSerializer(_student_orders(request.user).order_by('-created_at'), many=True).data)

    serializer = OrderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        order, qr = create_order(
            student=request.user,
            mess_facility=data['mess_facility'],
            meal_type=data['meal_type'],
            lines=data['items'],
            special_instructions=data['special_instructions'],
        )
    except MessServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    order = _student_orders(request.user).get(pk=order.pk)
    return Response({
        'order': OrderSerializer(order).data,
        'qr_code': qr.qr_code_data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(responses={200: OrderSerializer}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def order_detail(request, pk):
    order = _student_orders(request.user).filter(pk=pk).first()
    if order is None:
        return Response({'error': 'Order not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(OrderSerializer(order).data)


@extend_schema(responses={(200, 'image/png'): OpenApiTypes.BINARY}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def order_qr_image(request, pk):
    """PNG of the order's latest QR code for the collection counter."""
    order = get_object_or_404(Order, pk=pk, student=request.user)
    qr = order.qr_codes.order_by('-created_at').first()
    data = qr.qr_code_data if qr else order.order_number
    return HttpResponse(render_qr_png(data), content_type='image/png')


# =============================================================================
# Mess coupon & subscriptions
# =============================================================================

@extend_schema(tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def qr_code(request):
    """The student's mess coupon code and whether it currently grants access."""
    student = request.user
    subscription = student.get_active_subscription()
    if subscription is None:
        return Response({
            'qr_code': student.qr_code,
            'coupon_code': student.coupon_code,
            'status': 'inactive',
            'error': 'No active subscription found',
        })

    return Response({
        'qr_code': student.qr_code,
        'coupon_code': student.coupon_code,
        'status': 'active',
        'subscription': MobileSubscriptionSerializer(subscription).data,
    })


@extend_schema(tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def coupon_qr_image(request):
    """PNG of the mess coupon QR (``SUB-<register number>``)."""
    return HttpResponse(render_qr_png(request.user.coupon_code), content_type='image/png')


@extend_schema(responses={200: MobilePackageSerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def packages(request):
    """Purchasable packages; hostel residents only."""
    if not request.user.is_hosteler:
        return Response({
            'packages': [],
            'message': 'Package subscriptions are only available for hostel residents',
        })

    queryset = (
        Package.objects
        .filter(is_active=True, mess_facility__is_active=True)
        .select_related('mess_facility')
        .order_by('price')
    )
    return Response(MobilePackageSerializer(queryset, many=True).data)


@extend_schema(responses={200: MobileSubscriptionSerializer}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def subscription(request):
    """Current subscription, or null."""
    current = request.user.get_active_subscription()
    return Response(MobileSubscriptionSerializer(current).data if current else None)


@extend_schema(responses={200: MobileSubscriptionSerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def subscription_history(request):
    history = (
        request.user.subscriptions
        .select_related('package', 'mess_facility')
        .order_by('-created_at')
    )
    return Response(MobileSubscriptionSerializer(history, many=True).data)


# =============================================================================
# Notifications
# =============================================================================

@extend_schema(responses={200: NotificationSerializer(many=True)}, tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def notifications(request):
    """Latest 50 notifications addressed to the student or broadcast."""
    return Response(NotificationSerializer(inbox(request.user), many=True).data)


@extend_schema(tags=['mobile'])
@api_view(['GET'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def notifications_unread_count(request):
    return Response({'count': unread_count(request.user)})


@extend_schema(request=None, tags=['mobile'])
@api_view(['PUT'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def notification_read(request, pk):
    try:
        mark_read(notification_id=pk, student=request.user)
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'message': 'Notification marked as read'})


@extend_schema(request=PushTokenInputSerializer, tags=['mobile'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def push_token(request):
    serializer = PushTokenInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    register_push_token(student=request.user, **serializer.validated_data)
    return Response({'message': 'Push token registered successfully'})
