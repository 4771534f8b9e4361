import uuid
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models, transaction
from django.utils import timezone
from user.models import UserProfile


class Category(models.Model):
    """
    Grouping for recommendations. Categories without an owner are the
    pre-built set every user sees; owned categories are personal.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    user = models.ForeignKey(
        UserProfile,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='categories',
        help_text="Owner of a personal category; empty for pre-built categories"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'recommendations_category'
        verbose_name_plural = 'categories'
        constraints = [
            models.UniqueConstraint(fields=['name', 'user'], name='unique_category'),
        ]

    def __str__(self):
        return self.name


class Tag(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'recommendations_tag'

    def __str__(self):
        return self.name

    @classmethod
    def get_or_create_many(cls, names):
        """
        Returns Tag rows for the given names, creating the missing ones.
        Names are stripped and lower-cased; blanks and duplicates are dropped.
        """
        cleaned = []
        for name in names:
            name = (name or '').strip().lower()
            if name and name not in cleaned:
                cleaned.append(name)
        return [cls.objects.get_or_create(name=name)[0] for name in cleaned]


class Recommendation(models.Model):
    """
    A user's recommendation of a place, product or experience.

    Coordinates are optional but come in pairs: a recommendation either has
    both latitude and longitude or neither. Private recommendations are
    visible to their owner only.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='recommendations')

    title = models.CharField(max_length=200)
    description = models.TextField()
    image_url = models.TextField(blank=True, null=True)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="Rating from 1 to 5"
    )
    pro_tip = models.CharField(max_length=500, blank=True, null=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recommendations'
    )

    # Location
    location = models.CharField(max_length=500, blank=True, null=True, help_text="Human readable location")
    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)

    external_url = models.TextField(blank=True, null=True)
    is_private = models.BooleanField(default=False)
    tags = models.ManyToManyField(Tag, blank=True, related_name='recommendations')

    # Sole ordering key for listings, the activity feed and map search
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'recommendations_recommendation'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user'], name='idx_recommendations_user'),
            models.Index(fields=['category'], name='idx_recommendations_category'),
            models.Index(fields=['-created_at'], name='idx_recommendations_created'),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        """
        Overridden save method to ensure coordinates are paired and valid.
        """
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Latitude and longitude must be provided together")
        if self.has_location:
            if not (-90 <= self.latitude <= 90 and -180 <= self.longitude <= 180):
                raise ValueError("Invalid coordinates: latitude must be -90 to 90, longitude must be -180 to 180")

        super().save(*args, **kwargs)

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None

    def is_visible_to(self, viewer_id):
        return not self.is_private or (viewer_id is not None and self.user_id == viewer_id)


class CuratorRec(models.Model):
    """A recommendation featured by an administrator."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recommendation = models.ForeignKey(Recommendation, on_delete=models.CASCADE, related_name='curator_recs')
    curated_by = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='curated')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'recommendations_curator_rec'
        indexes = [
            models.Index(fields=['recommendation'], name='idx_curator_recs_rec'),
        ]

    def __str__(self):
        return f"Curated: {self.recommendation.title}"


class Section(models.Model):
    """
    Staff-managed homepage section showing a hand-picked, ordered list of
    recommendations next to the admin recommends assigned to it.
    """
    MAX_RECOMMENDATIONS = 8

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    subtitle = models.CharField(max_length=300, blank=True, null=True)
    display_order = models.IntegerField(default=0)
    created_by = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='sections')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'recommendations_section'
        ordering = ['display_order', '-created_at']
        indexes = [
            models.Index(fields=['display_order'], name='idx_sections_order'),
        ]

    def __str__(self):
        return self.title

    def add_recommendation(self, recommendation):
        """
        Appends a recommendation to the end of the section.

        Returns:
            (SectionRecommendation, created) tuple; adding an entry twice
            returns the existing one

        Raises:
            ValueError: the section already holds MAX_RECOMMENDATIONS entries
        """
        with transaction.atomic():
            # Serializes concurrent additions to the same section
            Section.objects.select_for_update().filter(pk=self.pk).first()

            existing = self.entries.filter(recommendation=recommendation).first()
            if existing:
                return existing, False

            count = self.entries.count()
            if count >= self.MAX_RECOMMENDATIONS:
                raise ValueError(f"Section can only have up to {self.MAX_RECOMMENDATIONS} recommendations")

            entry = SectionRecommendation.objects.create(
                section=self,
                recommendation=recommendation,
                display_order=count
            )
            return entry, True


class SectionRecommendation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    section = models.ForeignKey(Section, on_delete=models.CASCADE, related_name='entries')
    recommendation = models.ForeignKey(Recommendation, on_delete=models.CASCADE, related_name='section_entries')
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'recommendations_section_recommendation'
        ordering = ['display_order']
        indexes = [
            models.Index(fields=['section'], name='idx_section_recs_section'),
            models.Index(fields=['section', 'display_order'], name='idx_section_recs_order'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['section', 'recommendation'], name='unique_section_rec'),
        ]

    def __str__(self):
        return f"{self.section.title}: {self.recommendation.title}"


class AdminRecommend(models.Model):
    """
    Promotional card written by staff, linking to an external page.
    Hidden cards are only shown to staff.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    subtitle = models.CharField(max_length=300, blank=True, null=True)
    image_url = models.TextField()
    external_url = models.TextField()
    price = models.CharField(max_length=50, blank=True, null=True)
    is_visible = models.BooleanField(default=True)
    section = models.ForeignKey(
        Section,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='admin_recommends'
    )
    created_by = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='admin_recommends')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'recommendations_admin_recommend'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_visible'], name='idx_admin_recommends_visible'),
            models.Index(fields=['-created_at'], name='idx_admin_recommends_created'),
            models.Index(fields=['section'], name='idx_admin_recommends_section'),
        ]

    def __str__(self):
        return self.title
