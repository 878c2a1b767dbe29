from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Restaurant(models.Model):
    """
    A restaurant that orders can be placed against.

    Menu and catalog management live elsewhere; orders only need the
    restaurant's identity and owner for scoping and statistics.
    """

    name = models.CharField(_("name"), max_length=200)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="restaurants",
        help_text=_("Restaurant owner account"),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
