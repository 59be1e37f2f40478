"""
Authentication and user management views.
"""

from rest_framework import status, permissions, generics, filters
from rest_framework.decorators import api_view, permission_classes, action
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet
from rest_framework.mixins import ListModelMixin, RetrieveModelMixin, UpdateModelMixin, DestroyModelMixin
from rest_framework_simplejwt.views import TokenObtainPairView
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.common.permissions import IsAdmin
from .models import CustomUser
from .serializers import (
    AdminUserSerializer,
    CustomTokenObtainPairSerializer,
    PasswordChangeSerializer,
    UserRegistrationSerializer,
    UserSerializer,
)
import logging

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    """JWT login returning the user's role alongside the token pair."""

    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == 200:
            logger.info(f"Successful login for user: {request.data.get('email')}")
        return response


@extend_schema_view(
    post=extend_schema(summary="Register", description="Create a new author account.")
)
class UserRegistrationView(generics.CreateAPIView):
    """Handle user registration. New accounts always start with the AUTHOR role."""

    serializer_class = UserRegistrationSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"New user registered: {user.email}")


class PasswordChangeView(APIView):
    """Handle password change for authenticated users."""

    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(request=PasswordChangeSerializer, responses={200: None})
    def post(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Password changed for user: {request.user.email}")
        return Response({'success': True, 'message': 'Password changed successfully.'})


@extend_schema_view(
    list=extend_schema(summary="List users", description="Administrators list all accounts."),
    retrieve=extend_schema(summary="Get user"),
    update=extend_schema(summary="Update user", description="Change profile, role or account status."),
    partial_update=extend_schema(summary="Partially update user"),
    destroy=extend_schema(summary="Deactivate user", description="Soft-delete: the account becomes INACTIVE."),
)
class UserViewSet(ListModelMixin, RetrieveModelMixin, UpdateModelMixin, DestroyModelMixin, GenericViewSet):
    """
    Account management.

    Administrators manage every account; everybody else reaches their own
    record through ``/users/me/``. Users are never hard-deleted.
    """

    queryset = CustomUser.objects.all()
    serializer_class = AdminUserSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['email', 'first_name', 'last_name', 'affiliation']
    filterset_fields = ['role', 'account_status']
    ordering_fields = ['created_at', 'email', 'last_name']
    ordering = ['-created_at']

    def get_permissions(self):
        if self.action == 'me':
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def perform_update(self, serializer):
        user = serializer.save()
        logger.info(
            f"User {user.email} updated by {self.request.user.email} "
            f"(role={user.role}, status={user.account_status})"
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()

        if user.id == request.user.id:
            return Response(
                {'success': False, 'error': 'You cannot deactivate your own account.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        user.deactivate()
        logger.info(f"User {user.email} deactivated by {request.user.email}")
        return Response({'success': True, 'message': 'User deactivated.'})

    @extend_schema(request=UserSerializer, responses=UserSerializer)
    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        """Read or edit the current user's own profile."""
        if request.method == 'GET':
            return Response(UserSerializer(request.user).data)

        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health_check(request):
    """Health check endpoint."""
    return Response({
        'status': 'healthy',
        'service': 'journal-desk-api',
        'version': '1.0.0'
    })
