"""
Serializers for issues and published articles.
"""
from rest_framework import serializers

from apps.submissions.models import CoAuthor, Submission
from .models import Issue


class IssueSerializer(serializers.ModelSerializer):
    article_count = serializers.SerializerMethodField()

    class Meta:
        model = Issue
        fields = [
            'id', 'volume', 'number', 'title', 'description', 'is_current',
            'published_at', 'article_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_article_count(self, obj):
        return obj.articles.filter(status='PUBLISHED').count()


class IssuePublishArticleSerializer(serializers.Serializer):
    submission_id = serializers.UUIDField()
    pages = serializers.CharField(required=False, allow_blank=True, default='')


class ArticleAuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = CoAuthor
        fields = ['first_name', 'last_name', 'affiliation', 'orcid', 'is_corresponding']


class PublicArticleListSerializer(serializers.ModelSerializer):
    """Published article card for public listings."""

    authors = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = [
            'id', 'title', 'authors', 'keywords', 'manuscript_type', 'doi',
            'volume', 'issue_number', 'pages', 'published_at'
        ]
        read_only_fields = fields

    def get_authors(self, obj):
        names = [obj.author.get_full_name()]
        names.extend(co_author.get_full_name() for co_author in obj.co_authors.all())
        return names


class PublicIssueSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Issue
        fields = ['id', 'volume', 'number', 'title', 'published_at']
        read_only_fields = fields


class PublicArticleSerializer(PublicArticleListSerializer):
    """Full public view of a published article. Internal workflow fields are never exposed."""

    abstract = serializers.CharField(read_only=True)
    issue = PublicIssueSummarySerializer(read_only=True)
    corresponding_author = serializers.SerializerMethodField()
    co_authors = ArticleAuthorSerializer(many=True, read_only=True)

    class Meta(PublicArticleListSerializer.Meta):
        fields = PublicArticleListSerializer.Meta.fields + [
            'abstract', 'issue', 'corresponding_author', 'co_authors', 'submitted_at', 'accepted_at'
        ]
        read_only_fields = fields

    def get_corresponding_author(self, obj):
        author = obj.author
        return {
            'name': author.get_full_name(),
            'affiliation': author.affiliation,
            'orcid': author.orcid,
        }


class PublicIssueSerializer(serializers.ModelSerializer):
    articles = serializers.SerializerMethodField()

    class Meta:
        model = Issue
        fields = ['id', 'volume', 'number', 'title', 'description', 'is_current', 'published_at', 'articles']
        read_only_fields = fields

    def get_articles(self, obj):
        articles = obj.articles.filter(status='PUBLISHED').select_related('author').prefetch_related('co_authors')
        return PublicArticleListSerializer(articles.order_by('pages', 'published_at'), many=True).data
