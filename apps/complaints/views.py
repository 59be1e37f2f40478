"""
Administrative complaint handling.
"""
import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.permissions import IsAdmin
from .models import Complaint
from .serializers import ComplaintNoteSerializer, ComplaintSerializer

logger = logging.getLogger(__name__)


class ComplaintViewSet(viewsets.ModelViewSet):
    """
    Complaints and retraction requests. Status and priority are set by
    hand; RESOLVED and DISMISSED record ``resolved_at``.
    """
    queryset = Complaint.objects.select_related('assigned_to', 'submission').prefetch_related('notes__author')
    serializer_class = ComplaintSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'priority', 'complaint_type', 'assigned_to', 'submission']
    search_fields = ['subject', 'description', 'complainant_name', 'complainant_email']
    ordering_fields = ['created_at', 'priority', 'status']
    ordering = ['-created_at']

    def perform_create(self, serializer):
        complaint = serializer.save()
        logger.info(f"Complaint {complaint.pk} ({complaint.complaint_type}) recorded by {self.request.user.email}")

    def perform_update(self, serializer):
        previous = serializer.instance.status
        complaint = serializer.save()
        if complaint.status != previous:
            logger.info(f"Complaint {complaint.pk}: {previous} -> {complaint.status} by {self.request.user.email}")

    @extend_schema(methods=['GET'], responses=ComplaintNoteSerializer(many=True))
    @extend_schema(methods=['POST'], request=ComplaintNoteSerializer, responses=ComplaintNoteSerializer)
    @action(detail=True, methods=['get', 'post'])
    def notes(self, request, pk=None):
        complaint = self.get_object()
        if request.method == 'GET':
            return Response(ComplaintNoteSerializer(complaint.notes.select_related('author'), many=True).data)

        serializer = ComplaintNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = serializer.save(complaint=complaint, author=request.user)
        return Response(ComplaintNoteSerializer(note).data, status=status.HTTP_201_CREATED)
