from django.contrib import admin
from .models import Booking, Court, OperatingHours, Payment, Schedule, Student, StudentTenant

@admin.register(Court)
class CourtAdmin(admin.ModelAdmin):
    list_display = ['name', 'tenant_id', 'is_active', 'hourly_price', 'created_at']
    list_filter = ['is_active']

@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ['id', 'professor_id', 'court', 'start_time', 'end_time', 'is_available', 'is_blocked']
    list_filter = ['is_available', 'is_blocked']

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'service_type', 'status', 'student_id', 'court', 'booking_date', 'price']
    list_filter = ['status', 'service_type']

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'student_id', 'booking', 'amount', 'status', 'method', 'payment_date']
    list_filter = ['status', 'method']

@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'is_active']

@admin.register(StudentTenant)
class StudentTenantAdmin(admin.ModelAdmin):
    list_display = ['student_id', 'tenant_id', 'balance', 'is_active']

@admin.register(OperatingHours)
class OperatingHoursAdmin(admin.ModelAdmin):
    list_display = ['tenant_id', 'day_of_week', 'open_hour', 'close_hour', 'is_active']
