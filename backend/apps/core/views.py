import logging

from django.contrib.auth import authenticate, login, logout
from django.db.models import Q, Sum
from django.middleware.csrf import get_token
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions

from apps.core.serializers import UserSerializer, LoginSerializer

logger = logging.getLogger(__name__)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = authenticate(request, **ser.validated_data)

        if user is not None:
            login(request, user)
            csrf_token = get_token(request)
            return Response({
                'detail': 'Login successful.',
                'user': UserSerializer(user).data,
                'csrfToken': csrf_token
            }, status=status.HTTP_200_OK)
        logger.warning(f"Failed login for {ser.validated_data['username']}")
        return Response({'detail': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)


class LogoutView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        logout(request)
        return Response({'detail': 'Logout successful.'}, status=status.HTTP_200_OK)


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({
            'user': UserSerializer(request.user).data
        })


class DashboardView(APIView):
    """Custody counts over the whole collection plus the most visited expositions."""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        from apps.museum.models import Artefact, Exposition
        from apps.museum.serializers import ExpositionSerializer

        today = timezone.localdate()

        artefacts = Artefact.objects.all()
        on_loan_count = artefacts.filter(in_exposition=True).count()
        on_display_count = artefacts.filter(on_permanent_display=True).count()
        in_reserves_count = artefacts.filter(
            in_exposition=False, on_permanent_display=False).count()

        active_qs = Exposition.objects.filter(
            Q(end_date__isnull=True) | Q(end_date__gte=today))
        # Ended but still holding artefacts: the daily closer has not run yet
        overdue_qs = Exposition.objects.filter(
            end_date__lt=today, exposed_artefacts__isnull=False).distinct()

        total_visitors = Exposition.objects.aggregate(
            total=Sum('visitor_count'))['total'] or 0
        top_expositions = list(active_qs.order_by('-visitor_count', 'title')[:5])

        return Response({
            'artefact_count': artefacts.count(),
            'on_display_count': on_display_count,
            'in_reserves_count': in_reserves_count,
            'on_loan_count': on_loan_count,
            'active_exposition_count': active_qs.count(),
            'overdue_exposition_count': overdue_qs.count(),
            'total_visitors': total_visitors,
            'top_expositions': ExpositionSerializer(top_expositions, many=True).data,
        })
