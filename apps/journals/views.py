"""
Views for issues and the public article catalogue.

Editors manage issues and place accepted articles into them. Everything
under ``public/`` is anonymous and only ever exposes PUBLISHED articles.
"""
import logging

from django.db.models import Q
from django.http import FileResponse
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.permissions import IsEditor
from apps.submissions.lifecycle import PUBLISHED, PreconditionNotMet
from apps.submissions.models import Submission
from apps.submissions.serializers import SubmissionSerializer
from apps.submissions.services import lifecycle_manager
from .models import Issue
from .serializers import (
    IssuePublishArticleSerializer,
    IssueSerializer,
    PublicArticleListSerializer,
    PublicArticleSerializer,
    PublicIssueSerializer,
)

logger = logging.getLogger(__name__)

# DOIs contain a slash: <prefix>/<suffix>
DOI_PATH = r'doi/(?P<doi>10\.[^/]+/[^/]+)'


class IssueViewSet(viewsets.ModelViewSet):
    """Issue management for editors and administrators."""

    queryset = Issue.objects.all()
    serializer_class = IssueSerializer
    permission_classes = [IsAuthenticated, IsEditor]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['volume', 'is_current']
    ordering = ['-volume', '-number']

    def perform_create(self, serializer):
        issue = serializer.save()
        logger.info(f"Issue {issue} created by {self.request.user.email}")

    def perform_destroy(self, instance):
        if instance.articles.exists():
            raise PreconditionNotMet(detail='issues with articles cannot be deleted')
        logger.info(f"Issue {instance} deleted by {self.request.user.email}")
        instance.delete()


class IssueArticlePublishView(APIView):
    """
    Publish an accepted submission into an issue.

    POST /admin/issues/{id}/articles/publish/ with ``submission_id`` and ``pages``.
    """
    permission_classes = [IsAuthenticated, IsEditor]

    @extend_schema(request=IssuePublishArticleSerializer, responses=SubmissionSerializer, summary="Publish article into issue")
    def post(self, request, pk):
        issue = get_object_or_404(Issue, pk=pk)
        serializer = IssuePublishArticleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = get_object_or_404(Submission, pk=serializer.validated_data['submission_id'])

        submission = lifecycle_manager.publish(submission, request.user, issue, serializer.validated_data['pages'])
        return Response(
            SubmissionSerializer(submission, context={'request': request}).data,
            status=status.HTTP_200_OK
        )


def published_articles():
    return Submission.objects.filter(status=PUBLISHED).select_related('author', 'issue').prefetch_related('co_authors')


def article_file_response(article):
    """Serve the main manuscript file of a published article."""
    article_file = article.files.order_by('-is_main_file', 'uploaded_at').first()
    if article_file is None:
        raise NotFound('This article has no downloadable file.')
    logger.info(f"Public download of article {article.pk} ({article_file.original_name})")
    return FileResponse(
        article_file.file.open('rb'),
        as_attachment=True,
        filename=article_file.original_name,
        content_type=article_file.content_type or 'application/octet-stream',
    )


@extend_schema_view(
    list=extend_schema(summary="Browse published articles", description="Search by title, abstract or keyword."),
    retrieve=extend_schema(summary="Published article details"),
)
class PublicArticleViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [AllowAny]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['manuscript_type', 'volume', 'issue']
    ordering_fields = ['published_at', 'title']
    ordering = ['-published_at']

    def get_queryset(self):
        queryset = published_articles()
        term = self.request.query_params.get('search', '').strip()
        if term:
            # keywords is a JSON list, matched on its text
            queryset = queryset.filter(
                Q(title__icontains=term) | Q(abstract__icontains=term) | Q(keywords__icontains=term)
            )
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return PublicArticleListSerializer
        return PublicArticleSerializer

    def get_by_doi(self, doi):
        return get_object_or_404(published_articles(), doi=doi)

    @extend_schema(responses={200: bytes}, summary="Download a published article")
    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        return article_file_response(self.get_object())

    @extend_schema(responses=PublicArticleSerializer, summary="Published article by DOI")
    @action(detail=False, methods=['get'], url_path=DOI_PATH)
    def by_doi(self, request, doi=None):
        return Response(PublicArticleSerializer(self.get_by_doi(doi)).data)

    @extend_schema(responses={200: bytes}, summary="Download a published article by DOI")
    @action(detail=False, methods=['get'], url_path=DOI_PATH + r'/download')
    def download_by_doi(self, request, doi=None):
        return article_file_response(self.get_by_doi(doi))


class PublicIssueViewSet(viewsets.ReadOnlyModelViewSet):
    """Issues that carry at least one published article or have a publication date."""

    serializer_class = PublicIssueSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        return Issue.objects.filter(
            Q(published_at__isnull=False) | Q(articles__status=PUBLISHED)
        ).distinct().order_by('-volume', '-number')

    @extend_schema(responses=PublicIssueSerializer, summary="Current issue")
    @action(detail=False, methods=['get'])
    def current(self, request):
        issue = Issue.objects.filter(is_current=True).first()
        if issue is None:
            issue = self.get_queryset().first()
        if issue is None:
            raise NotFound('No issue has been published yet.')
        return Response(PublicIssueSerializer(issue).data)
