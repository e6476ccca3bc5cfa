"""
Document base — fields shared by every business document.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Document(models.Model):
    """
    Numbered business document.

    The code comes from the numbering service; user is attribution only.
    """

    code = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_('Código'),
    )
    date = models.DateField(verbose_name=_('Data'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Usuário'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-date', '-id']

    def __str__(self) -> str:
        return self.code
