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
            name='PlaybackState',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session_id', models.CharField(max_length=64, verbose_name='Identifiant de session (onglet)')),
                ('state', models.JSONField(blank=True, default=dict, verbose_name='État de lecture')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Créé le')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, verbose_name='Mis à jour le')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='playback_states', to=settings.AUTH_USER_MODEL, verbose_name='Utilisateur')),
            ],
            options={
                'verbose_name': 'Session de lecture',
                'verbose_name_plural': 'Sessions de lecture',
                'ordering': ['-updated_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='playbackstate',
            constraint=models.UniqueConstraint(fields=('user', 'session_id'), name='unique_playback_session'),
        ),
    ]
