"""Admin registration for restaurant models."""

from django.contrib import admin

from apps.web.restaurant.models import MenuItem, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Inline for items within an order."""

    model = OrderItem
    extra = 0
    fields = ["menu_item_id", "name", "quantity", "price", "line_total"]
    readonly_fields = ["menu_item_id", "name", "quantity", "price", "line_total"]
    can_delete = False


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin for menu items."""

    list_display = ["name", "category", "price", "created_at"]
    list_filter = ["category"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["name", "description", "price", "category"]}),
        ("Media", {"fields": ["image_url"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for orders. Only the status is editable."""

    list_display = [
        "pk",
        "customer_name",
        "user",
        "status",
        "order_type",
        "total",
        "created_at",
    ]
    list_filter = ["status", "order_type"]
    search_fields = ["customer_name", "customer_phone", "user__username"]
    inlines = [OrderItemInline]
    readonly_fields = [
        "user",
        "customer_name",
        "customer_phone",
        "order_type",
        "special_instructions",
        "subtotal",
        "tax",
        "total",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"

    fieldsets = [
        (None, {"fields": ["user", "status"]}),
        ("Customer", {"fields": ["customer_name", "customer_phone"]}),
        ("Order Details", {"fields": ["order_type", "special_instructions"]}),
        ("Pricing", {"fields": ["subtotal", "tax", "total"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    """Admin for order items."""

    list_display = ["name", "order", "quantity", "price"]
    search_fields = ["name"]
    readonly_fields = ["created_at", "updated_at"]
