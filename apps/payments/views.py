"""
Views for APC payments.

Authors see their own payments, upload proof and download invoices.
Administrators confirm, refund or fail payments under ``admin/payments/``.
"""
import logging

from django.http import FileResponse
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.permissions import IsActiveAccount, IsAdmin
from . import services
from .models import Payment
from .pdf_generator import generate_invoice_pdf
from .serializers import MarkPaidSerializer, PaymentNotesSerializer, PaymentProofSerializer, PaymentSerializer

logger = logging.getLogger(__name__)


def invoice_response(payment):
    buffer = generate_invoice_pdf(payment)
    return FileResponse(
        buffer,
        as_attachment=True,
        filename=f"{payment.invoice_number}.pdf",
        content_type='application/pdf',
    )


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """Payments owed by the current user."""

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsActiveAccount]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'submission']
    ordering = ['-created_at']

    def get_queryset(self):
        return Payment.objects.filter(user=self.request.user).select_related('submission', 'user')

    @extend_schema(request=PaymentProofSerializer, responses=PaymentSerializer, summary="Submit proof of payment")
    @action(detail=True, methods=['post'])
    def proof(self, request, pk=None):
        serializer = PaymentProofSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.submit_proof(self.get_object(), request.user, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(responses={200: bytes}, summary="Download invoice")
    @action(detail=True, methods=['get'])
    def invoice(self, request, pk=None):
        return invoice_response(self.get_object())


class AdminPaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """Every payment, with the administrative status actions."""

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'currency', 'payment_method', 'submission', 'user']
    search_fields = ['invoice_number', 'transaction_id', 'user__email', 'submission__title']
    ordering_fields = ['created_at', 'paid_at', 'amount']
    ordering = ['-created_at']

    def get_queryset(self):
        return Payment.objects.select_related('submission', 'user')

    @extend_schema(request=MarkPaidSerializer, responses=PaymentSerializer, summary="Mark payment as paid")
    @action(detail=True, methods=['post', 'put'])
    def paid(self, request, pk=None):
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.mark_paid(self.get_object(), request.user, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=PaymentNotesSerializer, responses=PaymentSerializer, summary="Refund payment")
    @action(detail=True, methods=['post', 'put'])
    def refund(self, request, pk=None):
        serializer = PaymentNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.refund(self.get_object(), request.user, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=PaymentNotesSerializer, responses=PaymentSerializer, summary="Mark payment as failed")
    @action(detail=True, methods=['post', 'put'])
    def fail(self, request, pk=None):
        serializer = PaymentNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.mark_failed(self.get_object(), request.user, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(responses={200: bytes}, summary="Download invoice")
    @action(detail=True, methods=['get'])
    def invoice(self, request, pk=None):
        return invoice_response(self.get_object())
