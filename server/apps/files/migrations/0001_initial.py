import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('original_name', models.CharField(help_text='Display name as uploaded by the owner', max_length=255)),
                ('mime_type', models.CharField(max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('storage_key', models.CharField(help_text='Blob name in storage', max_length=1024)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-uploaded_at', '-id'],
                'indexes': [models.Index(fields=['owner', '-uploaded_at'], name='files_owner_recent_idx')],
                'constraints': [models.UniqueConstraint(fields=('owner', 'original_name'), name='files_owner_name_unique')],
            },
        ),
    ]
