# Generated migration for recommendations app

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    dependencies = [
        ('recommendations', '0001_initial'),
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Section',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('subtitle', models.CharField(blank=True, max_length=300, null=True)),
                ('display_order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sections', to='user.userprofile')),
            ],
            options={
                'db_table': 'recommendations_section',
                'ordering': ['display_order', '-created_at'],
                'indexes': [models.Index(fields=['display_order'], name='idx_sections_order')],
            },
        ),
        migrations.CreateModel(
            name='SectionRecommendation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('display_order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('recommendation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='section_entries', to='recommendations.recommendation')),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='entries', to='recommendations.section')),
            ],
            options={
                'db_table': 'recommendations_section_recommendation',
                'ordering': ['display_order'],
                'indexes': [
                    models.Index(fields=['section'], name='idx_section_recs_section'),
                    models.Index(fields=['section', 'display_order'], name='idx_section_recs_order'),
                ],
                'constraints': [models.UniqueConstraint(fields=('section', 'recommendation'), name='unique_section_rec')],
            },
        ),
        migrations.CreateModel(
            name='AdminRecommend',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('subtitle', models.CharField(blank=True, max_length=300, null=True)),
                ('image_url', models.TextField()),
                ('external_url', models.TextField()),
                ('price', models.CharField(blank=True, max_length=50, null=True)),
                ('is_visible', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='admin_recommends', to='user.userprofile')),
                ('section', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='admin_recommends', to='recommendations.section')),
            ],
            options={
                'db_table': 'recommendations_admin_recommend',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['is_visible'], name='idx_admin_recommends_visible'),
                    models.Index(fields=['-created_at'], name='idx_admin_recommends_created'),
                    models.Index(fields=['section'], name='idx_admin_recommends_section'),
                ],
            },
        ),
    ]
