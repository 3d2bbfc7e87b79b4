"""
Validation des corps JSON des endpoints de suivi (Django REST framework).
"""

from rest_framework import serializers

from .progress import MILESTONES, PLAYER_EVENTS

MAX_EVENTS_PER_BATCH = 200


class MilestoneEventSerializer(serializers.Serializer):
    """Corps de `/api/hubspot-track/`: {email, milestone, percentage?, watchedSeconds?}"""
    email = serializers.EmailField()
    milestone = serializers.ChoiceField(choices=MILESTONES)
    percentage = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)
    watchedSeconds = serializers.FloatField(required=False, allow_null=True, min_value=0)


class PlayerEventSerializer(serializers.Serializer):
    """Un événement natif du lecteur vidéo."""
    type = serializers.ChoiceField(choices=PLAYER_EVENTS)
    currentTime = serializers.FloatField(required=False, allow_null=True, min_value=0)
    duration = serializers.FloatField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs['type'] == 'timeupdate' and attrs.get('currentTime') is None:
            raise serializers.ValidationError("timeupdate requires currentTime")
        return attrs


class PlaybackBatchSerializer(serializers.Serializer):
    """Lot d'événements d'un onglet: {session, events: [...]}"""
    session = serializers.RegexField(r'^[A-Za-z0-9_-]{8,64}$')
    events = PlayerEventSerializer(many=True, allow_empty=True, max_length=MAX_EVENTS_PER_BATCH)
