import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('files', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Share',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('user', 'User share'), ('link', 'Link share')], max_length=16)),
                ('role', models.CharField(choices=[('viewer', 'Viewer'), ('editor', 'Editor')], default='viewer', max_length=16)),
                ('link_token', models.CharField(blank=True, help_text='Unguessable token for link shares', max_length=64, null=True, unique=True)),
                ('expires_at', models.DateTimeField(blank=True, db_index=True, help_text='Share is inaccessible after this moment', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('file', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shares', to='files.file')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='owned_shares', to=settings.AUTH_USER_MODEL)),
                ('recipients', models.ManyToManyField(blank=True, related_name='received_shares', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Share',
                'verbose_name_plural': 'Shares',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['file', 'owner'], name='shares_file_owner_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('kind', 'link')), fields=('file', 'owner'), name='shares_one_link_per_file_owner'),
                    models.CheckConstraint(condition=models.Q(('role__in', ['viewer', 'editor'])), name='shares_role_valid'),
                    models.CheckConstraint(condition=models.Q(models.Q(('kind', 'link'), ('link_token__isnull', False)), models.Q(('kind', 'user'), ('link_token__isnull', True)), _connector='OR'), name='shares_token_matches_kind'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AccessLogEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('view', 'View'), ('download', 'Download')], max_length=16)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('share', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='access_log', to='sharing.share')),
                ('user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='access_events', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Access log entry',
                'verbose_name_plural': 'Access log',
                'ordering': ['timestamp', 'id'],
            },
        ),
    ]
