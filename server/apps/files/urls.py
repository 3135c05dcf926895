"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('upload/', views.upload, name='upload'),
    path('my-files/', views.my_files, name='my_files'),
    path('shared-with-me/', views.shared_with_me, name='shared_with_me'),
    path('<int:file_id>/', views.file_detail, name='detail'),
    path('<int:file_id>/download/', views.download, name='download'),
    path('<int:file_id>/view/', views.view, name='view'),
]
