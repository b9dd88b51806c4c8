from __future__ import annotations

from django.contrib import admin
from django.utils.html import format_html

from .models import Player, RegistrationWindow


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    list_display = ("name", "role", "mobile", "thumbnail", "created_at")
    list_filter = ("role",)
    search_fields = ("name", "mobile", "role")
    readonly_fields = ("uid", "thumbnail")
    ordering = ("created_at",)

    def thumbnail(self, obj: Player) -> str:
        if not obj.image_data_url:
            return "-"
        return format_html('<img src="{}" style="height:40px;width:40px;object-fit:cover" alt="">', obj.image_data_url)
    thumbnail.short_description = "Image"


@admin.register(RegistrationWindow)
class RegistrationWindowAdmin(admin.ModelAdmin):
    list_display = ("__str__", "deadline", "updated_at")

    def has_add_permission(self, request) -> bool:
        return not RegistrationWindow.objects.exists()

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
