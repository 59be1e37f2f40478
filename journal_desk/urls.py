"""
URL configuration for journal_desk project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # API endpoints
    path('api/v1/', include('apps.users.urls')),
    path('api/v1/', include('apps.submissions.urls')),
    path('api/v1/', include('apps.reviews.urls')),
    path('api/v1/', include('apps.payments.urls')),
    path('api/v1/', include('apps.journals.urls')),
    path('api/v1/', include('apps.complaints.urls')),
    path('api/v1/', include('apps.notifications.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
