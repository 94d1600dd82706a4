from django.db import IntegrityError, transaction
from django.test import TestCase, override_settings
from apps.museum.enums import CustodyState
from apps.museum.exceptions import (
    LoanConflictError, NotOnLoanError, InvalidLocationError,
)
from apps.museum.models import Artefact
from apps.museum.tests.factories import create_artefact, create_exposition

CUSTODY_SNAPSHOT = ('location', 'on_permanent_display', 'in_exposition',
                    'exposition_id', 'admitted_at')


def snapshot(artefact):
    return {field: getattr(artefact, field) for field in CUSTODY_SNAPSHOT}


class ArtefactTransitionTests(TestCase):
    def setUp(self):
        self.artefact = create_artefact(identification='EG1000', location='A3-27')
        self.expo = create_exposition(title='Gods of the Nile')

    # ──────────────────────────────────────────────────
    # Room / reserves
    # ──────────────────────────────────────────────────
    def test_move_to_room_sets_location_and_display(self):
        self.artefact.on_permanent_display = False
        self.artefact.move_to_room('B1-04')
        self.assertEqual(self.artefact.location, 'B1-04')
        self.assertTrue(self.artefact.on_permanent_display)
        self.assertFalse(self.artefact.in_exposition)
        self.assertEqual(self.artefact.custody_state, CustodyState.ROOM)

    def test_move_to_reserves_defaults_to_reserves_marker(self):
        self.artefact.move_to_reserves()
        self.assertEqual(self.artefact.location, 'In reserves')
        self.assertFalse(self.artefact.on_permanent_display)
        self.assertEqual(self.artefact.custody_state, CustodyState.RESERVES)

    def test_move_to_reserves_with_explicit_place(self):
        self.artefact.move_to_reserves('Depot 2, shelf 14')
        self.assertEqual(self.artefact.location, 'Depot 2, shelf 14')
        self.assertFalse(self.artefact.on_permanent_display)

    @override_settings(MUSEUM_RESERVES_LOCATION='Central depot')
    def test_reserves_marker_comes_from_settings(self):
        self.artefact.move_to_reserves()
        self.assertEqual(self.artefact.location, 'Central depot')

    def test_blank_room_is_rejected(self):
        before = snapshot(self.artefact)
        with self.assertRaises(InvalidLocationError):
            self.artefact.move_to_room('   ')
        self.assertEqual(snapshot(self.artefact), before)

    @override_settings(
        MUSEUM_ROOM_VALIDATOR='apps.museum.tests.factories.only_a_or_b_rooms')
    def test_room_validator_hook_is_consulted(self):
        self.artefact.move_to_room('B2-01')
        self.assertEqual(self.artefact.location, 'B2-01')
        with self.assertRaises(InvalidLocationError):
            self.artefact.move_to_room('Z9-99')
        self.assertEqual(self.artefact.location, 'B2-01')

    # ──────────────────────────────────────────────────
    # Loan guard
    # ──────────────────────────────────────────────────
    def test_commands_on_loaned_artefact_conflict_and_leave_fields(self):
        self.artefact.admit_to_exposition(self.expo)
        before = snapshot(self.artefact)
        other = create_exposition(title='Bronze Age Europe')

        for command in (
            lambda: self.artefact.move_to_room('B1-04'),
            lambda: self.artefact.move_to_reserves(),
            lambda: self.artefact.admit_to_exposition(other),
        ):
            with self.assertRaises(LoanConflictError) as ctx:
                command()
            self.assertEqual(ctx.exception.identification, 'EG1000')
            self.assertEqual(ctx.exception.status_code, 409)
            self.assertEqual(snapshot(self.artefact), before)

    def test_check_not_on_loan_passes_when_not_loaned(self):
        self.artefact.check_not_on_loan()
        self.assertFalse(self.artefact.is_on_loan)

    # ──────────────────────────────────────────────────
    # Exposition loan round trip
    # ──────────────────────────────────────────────────
    def test_admit_then_release_round_trip(self):
        self.artefact.admit_to_exposition(self.expo)
        self.assertEqual(self.artefact.location, 'Gods of the Nile')
        self.assertTrue(self.artefact.in_exposition)
        self.assertFalse(self.artefact.on_permanent_display)
        self.assertEqual(self.artefact.exposition, self.expo)
        self.assertIsNotNone(self.artefact.admitted_at)
        self.assertEqual(self.artefact.custody_state, CustodyState.EXPOSITION)

        self.artefact.release_from_exposition()
        self.assertEqual(self.artefact.location, 'In reserves')
        self.assertFalse(self.artefact.in_exposition)
        self.assertIsNone(self.artefact.exposition)
        self.assertIsNone(self.artefact.admitted_at)

    def test_second_release_raises_without_mutating(self):
        self.artefact.admit_to_exposition(self.expo)
        self.artefact.release_from_exposition()
        before = snapshot(self.artefact)

        with self.assertRaises(NotOnLoanError) as ctx:
            self.artefact.release_from_exposition()
        self.assertEqual(ctx.exception.identification, 'EG1000')
        self.assertEqual(snapshot(self.artefact), before)

    def test_double_admission_keeps_first_exposition(self):
        other = create_exposition(title='Bronze Age Europe')
        self.artefact.admit_to_exposition(self.expo)
        self.artefact.save()

        with self.assertRaises(LoanConflictError):
            self.artefact.admit_to_exposition(other)

        self.artefact.refresh_from_db()
        self.assertEqual(self.artefact.exposition, self.expo)
        self.assertEqual(self.expo.members, [self.artefact])
        self.assertEqual(other.members, [])

    def test_relocate_skips_loan_check(self):
        self.artefact.admit_to_exposition(self.expo)
        self.artefact.release_from_exposition()
        self.artefact.relocate('A1-01')
        self.assertEqual(self.artefact.location, 'A1-01')
        self.assertTrue(self.artefact.on_permanent_display)

    def test_relocate_while_on_loan_is_refused_by_the_database(self):
        self.artefact.admit_to_exposition(self.expo)
        self.artefact.save()
        self.artefact.relocate('A1-01')
        self.assertTrue(self.artefact.in_exposition)
        self.assertTrue(self.artefact.on_permanent_display)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self.artefact.save()
        self.artefact.refresh_from_db()
        self.assertFalse(self.artefact.on_permanent_display)
        self.assertEqual(self.artefact.location, 'Gods of the Nile')

    def test_unsaved_artefact_runs_transitions_in_memory(self):
        artefact = Artefact(identification='GR0042', location='In reserves')
        artefact.move_to_room('C4-11')
        self.assertEqual(artefact.location, 'C4-11')
        self.assertFalse(Artefact.objects.filter(pk='GR0042').exists())
