from django.db import models


class AppSetting(models.Model):
    """Site-wide key/value setting editable by staff, e.g. homepage copy."""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'core_app_setting'

    def __str__(self):
        return self.key

    @classmethod
    def get_value(cls, key):
        return cls.objects.filter(key=key).values_list('value', flat=True).first()

    @classmethod
    def set_value(cls, key, value):
        setting, _ = cls.objects.update_or_create(key=key, defaults={'value': value})
        return setting
