import django_filters
from django.db.models import Q

from modules.products.models import Product

SORTABLE_FIELDS = ("id", "name", "price", "stock", "sku")


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    minPrice = django_filters.NumberFilter(  # noqa: N815
        field_name="price", lookup_expr="gte", min_value=0
    )
    maxPrice = django_filters.NumberFilter(  # noqa: N815
        field_name="price", lookup_expr="lte", min_value=0
    )
    sortBy = django_filters.ChoiceFilter(  # noqa: N815
        choices=[(f, f) for f in SORTABLE_FIELDS], method="filter_noop"
    )
    order = django_filters.ChoiceFilter(
        choices=[("asc", "asc"), ("desc", "desc")], method="filter_noop"
    )

    class Meta:
        model = Product
        fields = ["search", "minPrice", "maxPrice", "sortBy", "order"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(sku__icontains=value))

    def filter_noop(self, queryset, name, value):
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        sort_by = self.form.cleaned_data.get("sortBy") or "id"
        prefix = "-" if self.form.cleaned_data.get("order") == "desc" else ""
        ordering = [f"{prefix}{sort_by}"]
        if sort_by != "id":
            ordering.append(f"{prefix}id")
        return queryset.order_by(*ordering)
