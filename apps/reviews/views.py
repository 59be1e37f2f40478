"""
Views for peer reviews.

Reviewers see and work on their own invitations; editors can see every
review and send reminders or move deadlines.
"""
import logging

from django.http import FileResponse
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, mixins, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.permissions import IsActiveAccount, IsEditor, has_capability
from apps.submissions.lifecycle import EDITOR_CAPABILITY, PreconditionNotMet
from apps.submissions.models import SubmissionFile
from . import lifecycle
from .models import Review
from .pdf_generator import generate_reviewer_certificate
from .serializers import (
    DeadlineExtensionSerializer,
    ReviewDraftSerializer,
    ReviewResponseSerializer,
    ReviewSerializer,
    ReviewSubmitSerializer,
)
from .services import review_manager

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="List reviews", description="Own reviews; editors see every review."),
    retrieve=extend_schema(summary="Get review details"),
)
class ReviewViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticated, IsActiveAccount]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'submission', 'recommendation']
    ordering_fields = ['due_date', 'invited_at', 'submitted_at']
    ordering = ['due_date']

    def get_queryset(self):
        queryset = Review.objects.select_related('reviewer', 'submission', 'submission__author').prefetch_related(
            'submission__files'
        )
        user = self.request.user
        if has_capability(user, EDITOR_CAPABILITY) and self.request.query_params.get('mine') != 'true':
            return queryset
        return queryset.filter(reviewer=user)

    def get_permissions(self):
        if self.action in ('remind', 'extend_deadline'):
            return [IsAuthenticated(), IsEditor()]
        return super().get_permissions()

    def _detail(self, review):
        return ReviewSerializer(review, context=self.get_serializer_context()).data

    @extend_schema(request=ReviewDraftSerializer, responses=ReviewSerializer, summary="Save review draft")
    def update(self, request, *args, **kwargs):
        serializer = ReviewDraftSerializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        review = review_manager.save_draft(self.get_object(), request.user, serializer.validated_data)
        return Response(self._detail(review))

    @extend_schema(request=ReviewDraftSerializer, responses=ReviewSerializer, summary="Save part of a review draft")
    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    @extend_schema(request=ReviewResponseSerializer, responses=ReviewSerializer, summary="Accept or decline invitation")
    @action(detail=True, methods=['post'])
    def respond(self, request, pk=None):
        serializer = ReviewResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = review_manager.respond(
            self.get_object(),
            request.user,
            serializer.validated_data['accept'],
            serializer.validated_data['decline_reason'],
        )
        return Response(self._detail(review))

    @extend_schema(request=ReviewSubmitSerializer, responses=ReviewSerializer, summary="Submit the review")
    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        serializer = ReviewSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = review_manager.submit(self.get_object(), request.user, serializer.validated_data)
        return Response(self._detail(review))

    @extend_schema(request=None, summary="Send a reminder to the reviewer")
    @action(detail=True, methods=['post'])
    def remind(self, request, pk=None):
        review, escalated = review_manager.remind(self.get_object(), request.user)
        return Response({
            'success': True,
            'data': self._detail(review),
            'message': 'Reminder sent; editors alerted.' if escalated else 'Reminder sent.',
        })

    @extend_schema(request=DeadlineExtensionSerializer, responses=ReviewSerializer, summary="Extend review deadline")
    @action(detail=True, methods=['post'], url_path='extend-deadline')
    def extend_deadline(self, request, pk=None):
        serializer = DeadlineExtensionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = review_manager.extend_deadline(self.get_object(), request.user, serializer.validated_data['due_date'])
        return Response(self._detail(review))

    @extend_schema(responses={200: bytes}, summary="Download reviewer certificate")
    @action(detail=True, methods=['get'])
    def certificate(self, request, pk=None):
        review = self.get_object()
        if review.reviewer_id != request.user.id:
            raise PermissionDenied('Only the reviewer can download this certificate.')
        if review.status != lifecycle.COMPLETED:
            raise PreconditionNotMet(detail='certificates are issued for completed reviews only')

        buffer = generate_reviewer_certificate(review)
        logger.info(f"Reviewer certificate generated for review {review.pk}")
        return FileResponse(
            buffer,
            as_attachment=True,
            filename=f"review-certificate-{str(review.pk)[:8]}.pdf",
            content_type='application/pdf',
        )

    @extend_schema(responses={200: bytes}, summary="Download a manuscript file under review")
    @action(detail=True, methods=['get'], url_path=r'files/(?P<file_id>[0-9a-f-]{36})/download')
    def download_file(self, request, pk=None, file_id=None):
        review = self.get_object()
        if review.reviewer_id != request.user.id:
            raise PermissionDenied('Only the invited reviewer can download files through this review.')
        if review.status != lifecycle.IN_PROGRESS:
            raise lifecycle.ReviewNotInProgress(detail='accept the invitation to read the manuscript')

        submission_file = get_object_or_404(SubmissionFile, pk=file_id, submission_id=review.submission_id)
        logger.info(f"Reviewer {request.user.email} downloaded file {submission_file.pk} of review {review.pk}")
        return FileResponse(
            submission_file.file.open('rb'),
            as_attachment=True,
            filename=submission_file.original_name,
            content_type=submission_file.content_type or 'application/octet-stream',
        )
