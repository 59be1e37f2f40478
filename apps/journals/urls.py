"""
URL configuration for journals app.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import IssueArticlePublishView, IssueViewSet, PublicArticleViewSet, PublicIssueViewSet

app_name = 'journals'

router = DefaultRouter()
router.register(r'issues', IssueViewSet, basename='issue')
router.register(r'public/articles', PublicArticleViewSet, basename='public-article')
router.register(r'public/issues', PublicIssueViewSet, basename='public-issue')

urlpatterns = [
    path('admin/issues/<int:pk>/articles/publish/', IssueArticlePublishView.as_view(), name='issue-article-publish'),
    path('', include(router.urls)),
]
