"""
URL configuration for submissions app.
Author endpoints under ``submissions/``, the editorial queue under ``editor/submissions/``.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import EditorSubmissionViewSet, SubmissionViewSet

router = DefaultRouter()
router.register(r'submissions', SubmissionViewSet, basename='submission')
router.register(r'editor/submissions', EditorSubmissionViewSet, basename='editor-submission')

app_name = 'submissions'

urlpatterns = [
    path('', include(router.urls)),
]
