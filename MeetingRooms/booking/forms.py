from django import forms
from django.contrib.auth.forms import PasswordChangeForm

from .models import Room


class RoomForm(forms.ModelForm):
    name = forms.CharField(
        max_length=100,
        error_messages={'required': 'Room name is required'},
    )
    capacity = forms.IntegerField(
        required=False,
        min_value=1,
        error_messages={
            'invalid': 'Capacity must be a positive integer',
            'min_value': 'Capacity must be a positive integer',
        },
    )

    class Meta:
        model = Room
        fields = ['name', 'capacity', 'description']

    def __init__(self, data=None, *args, **kwargs):
        if data is not None:
            data = dict(data)
            # The old client sent 0 / "" for "no capacity"
            if data.get('capacity') in (0, '0', ''):
                data['capacity'] = None
            if data.get('description') is None:
                data['description'] = ''
        super().__init__(data, *args, **kwargs)

    def first_error(self):
        """The first error message, in field order"""
        for field in self.Meta.fields:
            if field in self.errors:
                return self.errors[field][0]
        for messages in self.errors.values():
            return messages[0]
        return None


class AdminPasswordChangeForm(PasswordChangeForm):
    """Accepts the camelCase keys the admin panel posts"""

    FIELD_MAP = {
        'currentPassword': 'old_password',
        'newPassword': 'new_password1',
        'confirmPassword': 'new_password2',
    }

    def __init__(self, user, data=None, *args, **kwargs):
        if data is not None:
            data = {self.FIELD_MAP.get(key, key): value for key, value in data.items()}
        super().__init__(user, data, *args, **kwargs)

    def first_error(self):
        for field in ('old_password', 'new_password1', 'new_password2'):
            if field in self.errors:
                return self.errors[field][0]
        return None
