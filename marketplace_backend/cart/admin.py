# cart/admin.py

from django.contrib import admin

from cart.models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("user", "product", "quantity", "price_snapshot", "updated_at")
    search_fields = ("user__email", "product__name")
    readonly_fields = ("price_snapshot", "created_at", "updated_at")
