# Generated migration for recommendations app

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, help_text='Owner of a personal category; empty for pre-built categories', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='categories', to='user.userprofile')),
            ],
            options={
                'db_table': 'recommendations_category',
                'verbose_name_plural': 'categories',
                'constraints': [models.UniqueConstraint(fields=('name', 'user'), name='unique_category')],
            },
        ),
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=50, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'recommendations_tag',
            },
        ),
        migrations.CreateModel(
            name='Recommendation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField()),
                ('image_url', models.TextField(blank=True, null=True)),
                ('rating', models.PositiveSmallIntegerField(help_text='Rating from 1 to 5', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('pro_tip', models.CharField(blank=True, max_length=500, null=True)),
                ('location', models.CharField(blank=True, help_text='Human readable location', max_length=500, null=True)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('external_url', models.TextField(blank=True, null=True)),
                ('is_private', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recommendations', to='recommendations.category')),
                ('tags', models.ManyToManyField(blank=True, related_name='recommendations', to='recommendations.tag')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recommendations', to='user.userprofile')),
            ],
            options={
                'db_table': 'recommendations_recommendation',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user'], name='idx_recommendations_user'),
                    models.Index(fields=['category'], name='idx_recommendations_category'),
                    models.Index(fields=['-created_at'], name='idx_recommendations_created'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CuratorRec',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('curated_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='curated', to='user.userprofile')),
                ('recommendation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='curator_recs', to='recommendations.recommendation')),
            ],
            options={
                'db_table': 'recommendations_curator_rec',
                'indexes': [models.Index(fields=['recommendation'], name='idx_curator_recs_rec')],
            },
        ),
    ]
