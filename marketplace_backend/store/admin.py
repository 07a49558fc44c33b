# store/admin.py

from django.contrib import admin

from store.models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "is_open", "rating_avg", "rating_count", "created_at")
    list_filter = ("is_open",)
    search_fields = ("name", "address", "owner__email")
    readonly_fields = ("rating_avg", "rating_count", "created_at", "updated_at")
