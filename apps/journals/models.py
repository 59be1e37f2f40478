"""
Journal models for Journal Desk.
Issues group published articles into volumes.
"""
from django.db import models, transaction


class Issue(models.Model):
    """
    Journal issue identified by volume and number.
    """
    volume = models.PositiveIntegerField()
    number = models.PositiveIntegerField()
    title = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    is_current = models.BooleanField(
        default=False,
        help_text="Shown as the current issue on the public site"
    )
    published_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-volume', '-number']
        unique_together = ['volume', 'number']
        indexes = [
            models.Index(fields=['is_current'], name='issue_current_idx'),
        ]

    def __str__(self):
        label = f"Vol. {self.volume}, No. {self.number}"
        return f"{label}: {self.title}" if self.title else label

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_current:
                Issue.objects.filter(is_current=True).exclude(pk=self.pk).update(is_current=False)
            super().save(*args, **kwargs)
