from django.contrib import admin
from django.utils.html import format_html
from .models import Indent, IndentItem, IndentStatus, Issue, IssueItem


class IndentItemInline(admin.TabularInline):
    model = IndentItem
    extra = 0
    readonly_fields = ['issued_qty']


@admin.register(Indent)
class IndentAdmin(admin.ModelAdmin):
    list_display = ['requested_for_date', 'meal', 'requested_by', 'status_badge', 'approved_by', 'created_at']
    list_filter = ['status', 'meal', 'requested_for_date']
    search_fields = ['requested_by__email', 'requested_by__name', 'notes']
    readonly_fields = ['approved_by', 'approved_at', 'created_at', 'updated_at']
    inlines = [IndentItemInline]

    def status_badge(self, obj):
        colors = {
            IndentStatus.PENDING: '#ffc107',
            IndentStatus.APPROVED: '#17a2b8',
            IndentStatus.REJECTED: '#dc3545',
            IndentStatus.ISSUED: '#28a745',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('requested_by', 'approved_by')


class IssueItemInline(admin.TabularInline):
    model = IssueItem
    extra = 0
    can_delete = False
    readonly_fields = ['item', 'batch', 'qty']


@admin.register(Issue)
class IssueAdmin(admin.ModelAdmin):
    list_display = ['id', 'indent', 'issued_by', 'issued_at']
    readonly_fields = ['indent', 'issued_by', 'notes', 'issued_at']
    inlines = [IssueItemInline]

    def has_add_permission(self, request):
        return False
