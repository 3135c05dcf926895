"""URL routes for sharing app."""

from django.urls import path

from server.apps.sharing import views

app_name = 'sharing'

urlpatterns = [
    path('user/', views.share_with_users_view, name='share_with_users'),
    path('link/', views.create_link_view, name='create_link'),
    path('link/<str:token>/', views.resolve_link_view, name='resolve_link'),
    path('file/<int:file_id>/', views.file_shares_view, name='file_shares'),
    path('audit/<int:file_id>/', views.audit_log_view, name='audit_log'),
    path('<int:share_id>/', views.revoke_view, name='revoke'),
    path(
        '<int:share_id>/user/<int:user_id>/',
        views.remove_recipient_view,
        name='remove_recipient',
    ),
]
