import uuid

from django.db import migrations, models

import integrations.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CalendarCredential',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('type', models.CharField(choices=[('google', 'Google Calendar'), ('microsoft', 'Microsoft Outlook')], max_length=20, unique=True, verbose_name='Provider type')),
                ('client_id', models.CharField(max_length=255, verbose_name='Client ID')),
                ('client_secret', integrations.models.EncryptedTextField(blank=True, verbose_name='Client secret')),
                ('redirect_uri', models.URLField(blank=True, default='', max_length=500)),
                ('refresh_token', integrations.models.EncryptedTextField(blank=True, default='', verbose_name='Refresh token')),
                ('tenant_id', models.CharField(blank=True, default='', help_text='Azure AD tenant (Microsoft only).', max_length=255)),
            ],
            options={
                'verbose_name': 'Calendar Credential',
                'verbose_name_plural': 'Calendar Credentials',
                'ordering': ['type'],
            },
        ),
    ]
