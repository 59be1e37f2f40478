"""
ViewSets for submissions.

Authors work on their own manuscripts through ``SubmissionViewSet``;
editors drive screening, decisions and publication through
``EditorSubmissionViewSet``. Every status change goes through
``lifecycle_manager``.
"""
import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.permissions import IsActiveAccount, IsEditor
from apps.journals.models import Issue
from apps.reviews.serializers import ReviewSerializer
from apps.reviews.services import review_manager
from . import lifecycle
from .lifecycle import PreconditionNotMet
from .models import Submission, SubmissionFile
from .serializers import (
    AssignEditorSerializer,
    EditorAssignmentSerializer,
    EditorialDecisionSerializer,
    InviteReviewerSerializer,
    ProofApprovalSerializer,
    PublishSerializer,
    RevisionCreateSerializer,
    RevisionSerializer,
    ScreeningDecisionSerializer,
    SubmissionFileSerializer,
    SubmissionListSerializer,
    SubmissionSerializer,
    SubmissionTimelineSerializer,
    WithdrawSerializer,
)
from .services import lifecycle_manager

logger = logging.getLogger(__name__)


class SubmissionViewSet(viewsets.ModelViewSet):
    """
    The current user's own submissions.

    Drafts can be created, edited and deleted; everything after that is a
    lifecycle action.
    """
    serializer_class = SubmissionSerializer
    permission_classes = [IsAuthenticated, IsActiveAccount]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'manuscript_type']
    search_fields = ['title', 'abstract']
    ordering_fields = ['created_at', 'submitted_at', 'updated_at', 'title']
    ordering = ['-created_at']

    def get_queryset(self):
        return Submission.objects.filter(author=self.request.user).select_related(
            'author', 'issue'
        ).prefetch_related('co_authors', 'files', 'revisions__files')

    def get_serializer_class(self):
        if self.action == 'list':
            return SubmissionListSerializer
        return SubmissionSerializer

    def perform_create(self, serializer):
        submission = serializer.save(author=self.request.user)
        logger.info(f"Draft submission {submission.pk} created by {self.request.user.email}")

    def perform_destroy(self, instance):
        if instance.status != lifecycle.DRAFT:
            raise PreconditionNotMet(detail='only drafts can be deleted, withdraw the submission instead')
        logger.info(f"Draft submission {instance.pk} deleted by {self.request.user.email}")
        instance.delete()

    def _detail(self, submission):
        return SubmissionSerializer(submission, context=self.get_serializer_context()).data

    @extend_schema(request=None, responses=SubmissionSerializer, summary="Submit a draft")
    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        submission = lifecycle_manager.submit(self.get_object(), request.user)
        return Response(self._detail(submission))

    @extend_schema(request=WithdrawSerializer, responses=SubmissionSerializer, summary="Withdraw a submission")
    @action(detail=True, methods=['post'])
    def withdraw(self, request, pk=None):
        serializer = WithdrawSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = lifecycle_manager.withdraw(
            self.get_object(), request.user, serializer.validated_data['reason']
        )
        return Response(self._detail(submission))

    @extend_schema(methods=['GET'], responses=RevisionSerializer(many=True))
    @extend_schema(methods=['POST'], request=RevisionCreateSerializer, responses=RevisionSerializer)
    @action(detail=True, methods=['get', 'post'])
    def revisions(self, request, pk=None):
        submission = self.get_object()
        if request.method == 'GET':
            serializer = RevisionSerializer(submission.revisions.prefetch_related('files'), many=True)
            return Response(serializer.data)

        serializer = RevisionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        revision = lifecycle_manager.submit_revision(
            submission,
            request.user,
            serializer.validated_data['response_to_reviewers'],
            revision_letter=serializer.validated_data['revision_letter'],
            files=serializer.validated_data['files'],
        )
        return Response(RevisionSerializer(revision).data, status=status.HTTP_201_CREATED)

    @extend_schema(methods=['GET'], responses=SubmissionFileSerializer(many=True))
    @extend_schema(methods=['POST'], request=SubmissionFileSerializer, responses=SubmissionFileSerializer)
    @action(detail=True, methods=['get', 'post'])
    def files(self, request, pk=None):
        submission = self.get_object()
        if request.method == 'GET':
            return Response(SubmissionFileSerializer(submission.files.all(), many=True).data)

        if not submission.is_editable:
            raise PreconditionNotMet(detail=f"files cannot be changed while the submission is {submission.status}")

        serializer = SubmissionFileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        upload = serializer.validated_data['file']
        submission_file = serializer.save(
            submission=submission,
            original_name=upload.name,
            content_type=getattr(upload, 'content_type', '') or '',
            size=upload.size,
            uploaded_by=request.user,
        )
        logger.info(f"File {submission_file.original_name} uploaded to submission {submission.pk}")
        return Response(SubmissionFileSerializer(submission_file).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'files/(?P<file_id>[^/.]+)')
    def delete_file(self, request, pk=None, file_id=None):
        submission = self.get_object()
        if not submission.is_editable:
            raise PreconditionNotMet(detail=f"files cannot be changed while the submission is {submission.status}")
        submission_file = get_object_or_404(SubmissionFile, pk=file_id, submission=submission)
        submission_file.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ProofApprovalSerializer, responses=SubmissionSerializer, summary="Approve or correct the proof")
    @action(detail=True, methods=['post'], url_path='proof-approval')
    def proof_approval(self, request, pk=None):
        serializer = ProofApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = lifecycle_manager.approve_proof(
            self.get_object(),
            request.user,
            serializer.validated_data['approved'],
            serializer.validated_data['comments'],
        )
        return Response(self._detail(submission))

    @extend_schema(responses=SubmissionTimelineSerializer(many=True))
    @action(detail=True, methods=['get'])
    def timeline(self, request, pk=None):
        entries = self.get_object().timeline.select_related('performed_by')
        return Response(SubmissionTimelineSerializer(entries, many=True).data)


class EditorSubmissionViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Editorial queue. Drafts are private to their authors and never listed.
    """
    serializer_class = SubmissionSerializer
    permission_classes = [IsAuthenticated, IsEditor]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'manuscript_type', 'author']
    search_fields = ['title', 'abstract', 'author__email', 'author__last_name']
    ordering_fields = ['submitted_at', 'updated_at', 'title']
    ordering = ['-submitted_at']

    def get_queryset(self):
        queryset = Submission.objects.exclude(status=lifecycle.DRAFT).select_related(
            'author', 'issue'
        ).prefetch_related('co_authors', 'files', 'revisions__files')
        if self.request.query_params.get('assigned') == 'me':
            queryset = queryset.filter(editor_assignments__editor=self.request.user)
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return SubmissionListSerializer
        return SubmissionSerializer

    def _detail(self, submission):
        return SubmissionSerializer(submission, context=self.get_serializer_context()).data

    @extend_schema(request=None, responses=SubmissionSerializer)
    @action(detail=True, methods=['post'], url_path='begin-screening')
    def begin_screening(self, request, pk=None):
        submission = lifecycle_manager.begin_screening(self.get_object(), request.user)
        return Response(self._detail(submission))

    @extend_schema(request=ScreeningDecisionSerializer, responses=SubmissionSerializer, summary="Initial screening decision")
    @action(detail=True, methods=['post'])
    def screen(self, request, pk=None):
        serializer = ScreeningDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        submission = lifecycle_manager.screen(
            self.get_object(),
            request.user,
            data['decision'],
            scope_check=data['scope_check'],
            format_check=data['format_check'],
            comments=data['comments'],
        )
        return Response(self._detail(submission))

    @extend_schema(request=EditorialDecisionSerializer, responses=SubmissionSerializer, summary="Editorial decision")
    @action(detail=True, methods=['post'])
    def decision(self, request, pk=None):
        serializer = EditorialDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = lifecycle_manager.decide(
            self.get_object(),
            request.user,
            serializer.validated_data['decision'],
            serializer.validated_data['comments'],
        )
        return Response(self._detail(submission))

    @extend_schema(request=PublishSerializer, responses=SubmissionSerializer, summary="Publish into an issue")
    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        serializer = PublishSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        issue = get_object_or_404(Issue, pk=serializer.validated_data['issue_id'])
        submission = lifecycle_manager.publish(
            self.get_object(), request.user, issue, serializer.validated_data['pages']
        )
        return Response(self._detail(submission))

    @extend_schema(request=AssignEditorSerializer, responses=EditorAssignmentSerializer)
    @action(detail=True, methods=['post'], url_path='assign-editor')
    def assign_editor(self, request, pk=None):
        serializer = AssignEditorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        editor = get_object_or_404(get_user_model(), pk=serializer.validated_data['editor_id'])
        assignment, created = lifecycle_manager.assign_editor(
            self.get_object(), request.user, editor, serializer.validated_data['is_chief']
        )
        return Response(
            EditorAssignmentSerializer(assignment).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    @extend_schema(request=InviteReviewerSerializer, responses=ReviewSerializer, summary="Invite a reviewer")
    @action(detail=True, methods=['post'], url_path='invite-reviewer')
    def invite_reviewer(self, request, pk=None):
        serializer = InviteReviewerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reviewer = get_object_or_404(get_user_model(), pk=serializer.validated_data['reviewer_id'])
        review = review_manager.invite(
            self.get_object(),
            request.user,
            reviewer,
            due_date=serializer.validated_data['due_date'],
            message=serializer.validated_data['message'],
        )
        return Response(
            ReviewSerializer(review, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(responses=ReviewSerializer(many=True))
    @action(detail=True, methods=['get'])
    def reviews(self, request, pk=None):
        reviews = self.get_object().reviews.select_related('reviewer', 'submission__author')
        return Response(ReviewSerializer(reviews, many=True, context=self.get_serializer_context()).data)

    @extend_schema(responses=SubmissionTimelineSerializer(many=True))
    @action(detail=True, methods=['get'])
    def timeline(self, request, pk=None):
        entries = self.get_object().timeline.select_related('performed_by')
        return Response(SubmissionTimelineSerializer(entries, many=True).data)
