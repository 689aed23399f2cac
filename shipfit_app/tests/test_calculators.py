"""Tests for the per-fitting calculators: dps, ammunition, tank, capacitor, navigation, targeting."""

from __future__ import annotations

import asyncio
import math

import pytest

from shipfit_app.config.limits import AU_IN_METERS, MAX_SUBWARP_VELOCITY
from shipfit_app.models import Character, EntityType, Fitting, ModuleEntry, SkillRecord, SlotCategory, TypeCategory
from shipfit_app.services.ammunition import AmmunitionCalculator, DamageProfile
from shipfit_app.services.capacitor import CapacitorCalculator, time_to_empty
from shipfit_app.services.dps import DpsCalculator
from shipfit_app.services.errors import NotFoundError
from shipfit_app.services.navigation import NavigationCalculator, align_time
from shipfit_app.services.stacking_penalty import penalty_factor
from shipfit_app.services.tank import TankCalculator, resist_percent
from shipfit_app.services.targeting import TargetingCalculator, lock_time
from shipfit_app.tests import sample_data as sd


def _rifter(**slots) -> Fitting:
    return Fitting(id=10, name="Test", ship_type_id=sd.RIFTER, **slots)


class TestDamageProfile:
    def test_total_and_scale(self):
        profile = DamageProfile(em=1.0, thermal=2.0, kinetic=3.0, explosive=4.0)
        assert profile.total == pytest.approx(10.0)
        assert profile.scaled(2.0).kinetic == pytest.approx(6.0)
        assert (profile + profile).em == pytest.approx(2.0)


class TestDpsCalculator:
    def test_sample_fitting(self, store, sample_fitting):
        result = asyncio.run(DpsCalculator(store).calculate(sample_fitting))

        damage_upgrades = 1.1 * (1 + 0.1 * penalty_factor(1))
        rof_upgrades = 0.9 * (1 - 0.1 * penalty_factor(1))
        volley = 12.0 * 2.0 * damage_upgrades * 3
        cycle = 2.0 * rof_upgrades
        assert result.volley == pytest.approx(volley)
        assert result.weapon_dps == pytest.approx(volley / cycle)
        assert result.drone_dps == pytest.approx(12.0 * 1.9 * 2 / 4.0)
        assert result.total_dps == pytest.approx(result.weapon_dps + result.drone_dps)
        assert result.damage_profile.total == pytest.approx(result.total_dps)
        (weapon,) = result.weapons
        assert weapon.quantity == 3
        assert weapon.cycle_time_s == pytest.approx(cycle)

    def test_skills_increase_dps(self, store, sample_fitting, skilled_character):
        base = asyncio.run(DpsCalculator(store).calculate(sample_fitting))
        skilled = asyncio.run(DpsCalculator(store).calculate(sample_fitting, skilled_character))
        assert skilled.weapon_dps == pytest.approx(base.weapon_dps * 1.12 / (0.9 * 0.84))
        assert skilled.drone_dps == pytest.approx(base.drone_dps * 2.0)

    def test_unloaded_weapon_deals_nothing(self, store):
        fitting = _rifter(high_slots=[ModuleEntry(sd.AUTOCANNON, SlotCategory.HIGH)])
        result = asyncio.run(DpsCalculator(store).calculate(fitting))
        assert result.total_dps == 0.0
        assert result.weapons == ()

    def test_offline_weapons_and_drones_ignored(self, store):
        fitting = _rifter(
            high_slots=[ModuleEntry(sd.AUTOCANNON, SlotCategory.HIGH, charge_type_id=sd.EMP_S, online=False)],
            drones=[ModuleEntry(sd.HOBGOBLIN, SlotCategory.DRONE, online=False)],
        )
        result = asyncio.run(DpsCalculator(store).calculate(fitting))
        assert result.total_dps == 0.0

    def test_active_drone_limit(self, store):
        hobgoblin_dps = 12.0 * 1.9 / 4.0
        five = _rifter(drones=[ModuleEntry(sd.HOBGOBLIN, SlotCategory.DRONE, quantity=5)])
        untrained = asyncio.run(DpsCalculator(store).calculate(five))
        assert untrained.drone_dps == pytest.approx(2 * hobgoblin_dps)
        (drone,) = untrained.drones
        assert drone.quantity == 2

        # Drones skill adds one controlled drone per level
        pilot = Character.from_records(7, "Drone Pilot", [SkillRecord(3436, 3)])
        trained = asyncio.run(DpsCalculator(store).calculate(five, pilot))
        assert trained.drone_dps == pytest.approx(5 * hobgoblin_dps)

    def test_hull_caps_active_drones(self, store):
        fifty = _rifter(drones=[ModuleEntry(sd.HOBGOBLIN, SlotCategory.DRONE, quantity=50)])
        pilot = Character.from_records(7, "Drone Pilot", [SkillRecord(3436, 5)])
        result = asyncio.run(DpsCalculator(store).calculate(fifty, pilot))
        assert result.drone_dps == pytest.approx(5 * 12.0 * 1.9 / 4.0)

    def test_strongest_drones_launch_first(self, store):
        fitting = _rifter(
            drones=[
                ModuleEntry(sd.WARRIOR, SlotCategory.DRONE, quantity=3),
                ModuleEntry(sd.HOBGOBLIN, SlotCategory.DRONE, quantity=1),
            ]
        )
        result = asyncio.run(DpsCalculator(store).calculate(fitting))
        assert [(d.type_id, d.quantity) for d in result.drones] == [(sd.HOBGOBLIN, 1), (sd.WARRIOR, 1)]
        assert result.drone_dps == pytest.approx(12.0 * 1.9 / 4.0 + 10.0 * 1.2 / 4.0)
        assert result.damage_profile.explosive == pytest.approx(10.0 * 1.2 / 4.0)

    def test_empty_fitting_reports_float_dps(self, store, empty_fitting):
        result = asyncio.run(DpsCalculator(store).calculate(empty_fitting))
        assert isinstance(result.weapon_dps, float)
        assert isinstance(result.drone_dps, float)
        assert result.total_dps == 0.0

    def test_unknown_charge_raises(self, store):
        fitting = _rifter(high_slots=[ModuleEntry(sd.AUTOCANNON, SlotCategory.HIGH, charge_type_id=424242)])
        with pytest.raises(NotFoundError):
            asyncio.run(DpsCalculator(store).calculate(fitting))


class TestAmmunitionCalculator:
    def test_charge_multipliers(self, store):
        fitting = _rifter(high_slots=[ModuleEntry(sd.AUTOCANNON, SlotCategory.HIGH, charge_type_id=sd.BARRAGE_S)])
        result = asyncio.run(AmmunitionCalculator(store).calculate(fitting))
        (effect,) = result.for_module(sd.AUTOCANNON)
        assert effect.charge_type_id == sd.BARRAGE_S
        assert effect.falloff == pytest.approx(5600.0)
        assert effect.tracking_speed == pytest.approx(0.3)
        assert effect.optimal_range == pytest.approx(1200.0)
        assert effect.damage_profile.total == pytest.approx(8.0)
        assert effect.charges_per_reload == 160

    def test_modules_without_charges_skipped(self, store, sample_fitting):
        result = asyncio.run(AmmunitionCalculator(store).calculate(sample_fitting))
        assert [e.module_type_id for e in result.effects] == [sd.AUTOCANNON]

    def test_charge_must_be_charge(self, store):
        fitting = _rifter(high_slots=[ModuleEntry(sd.AUTOCANNON, SlotCategory.HIGH, charge_type_id=sd.TRITANIUM)])
        with pytest.raises(NotFoundError):
            asyncio.run(AmmunitionCalculator(store).calculate(fitting))


class TestTankCalculator:
    def test_sample_fitting(self, store, sample_fitting):
        result = asyncio.run(TankCalculator(store).calculate(sample_fitting))
        assert result.shield_capacity == pytest.approx(712.0)
        assert result.shield_recharge_time_s == pytest.approx(625.0)
        assert result.shield_passive_regen == pytest.approx(712.0 / 625.0)
        assert result.shield_peak_regen == pytest.approx(2.5 * 712.0 / 625.0)

        shield_em = (1 - 1.0 * 0.7 * (1 - 0.125 * penalty_factor(1))) * 100
        assert result.shield_resists.em == pytest.approx(shield_em)
        assert result.armor_resists.em == pytest.approx(66.0)
        assert result.hull_resists.em == pytest.approx(59.8)

    def test_effective_hp(self, store, sample_fitting):
        result = asyncio.run(TankCalculator(store).calculate(sample_fitting))
        mean_resonance = 1 - result.shield_resists.average / 100
        assert result.effective_hp.shield == pytest.approx(712.0 / mean_resonance)
        assert result.effective_hp.total > result.shield_capacity + result.armor_hp + result.hull_hp

    def test_skills(self, store, sample_fitting, skilled_character):
        result = asyncio.run(TankCalculator(store).calculate(sample_fitting, skilled_character))
        assert result.shield_capacity == pytest.approx(712.0 * 1.25)

    def test_active_repair(self, store):
        fitting = _rifter(
            medium_slots=[ModuleEntry(sd.SHIELD_BOOSTER, SlotCategory.MEDIUM)],
            low_slots=[ModuleEntry(sd.ARMOR_REPAIRER, SlotCategory.LOW)],
        )
        result = asyncio.run(TankCalculator(store).calculate(fitting))
        assert result.shield_boost_rate == pytest.approx(38.0 / 3.0)
        assert result.armor_repair_rate == pytest.approx(60.0 / 9.0)
        assert result.hull_repair_rate == 0.0

    def test_resist_clamped(self):
        assert resist_percent(1.0, 1.5) == 0.0
        assert resist_percent(0.0, 1.0) == 100.0


class TestCapacitor:
    def _fit(self, *entries) -> Fitting:
        return Fitting(id=20, name="Cap", ship_type_id=sd.CAP_HULL, high_slots=list(entries))

    def test_no_drain_is_stable(self, store):
        result = asyncio.run(CapacitorCalculator(store).calculate(self._fit()))
        assert result.stable
        assert math.isinf(result.time_to_empty_s)
        assert result.tau == pytest.approx(120.0)
        assert result.peak_recharge_rate == pytest.approx(2000.0 / 120.0)

    def test_drain_above_peak_is_linear(self, store):
        result = asyncio.run(
            CapacitorCalculator(store).calculate(self._fit(ModuleEntry(sd.CAP_HEAVY_DRAIN, SlotCategory.HIGH)))
        )
        assert not result.stable
        assert result.drain_rate == pytest.approx(100.0)
        assert result.time_to_empty_s == pytest.approx(20.0)

    def test_drain_below_peak_follows_curve(self, store):
        result = asyncio.run(
            CapacitorCalculator(store).calculate(self._fit(ModuleEntry(sd.CAP_LIGHT_DRAIN, SlotCategory.HIGH)))
        )
        assert result.time_to_empty_s == pytest.approx(120.0 * math.log(2000.0 / 800.0))
        assert result.delta == pytest.approx(2000.0 / 120.0 - 10.0)

    def test_offline_module_does_not_drain(self, store):
        entry = ModuleEntry(sd.CAP_HEAVY_DRAIN, SlotCategory.HIGH, online=False)
        result = asyncio.run(CapacitorCalculator(store).calculate(self._fit(entry)))
        assert result.stable

    def test_sample_fitting(self, store, sample_fitting):
        result = asyncio.run(CapacitorCalculator(store).calculate(sample_fitting))
        assert result.drain_rate == pytest.approx(0.9)
        assert result.time_to_empty_s == pytest.approx(25.0 * math.log(250.0 / (250.0 - 0.9 * 25.0)))
        assert [d.type_id for d in result.drains] == [sd.AFTERBURNER]

    def test_time_to_empty_function(self):
        assert math.isinf(time_to_empty(100.0, 10.0, 0.0))
        assert time_to_empty(100.0, 10.0, 1000.0) == pytest.approx(0.1)


class TestNavigation:
    def test_sample_fitting(self, store, sample_fitting):
        result = asyncio.run(NavigationCalculator(store).calculate(sample_fitting))
        mass = 1067000.0 + 500000.0
        assert result.mass == pytest.approx(mass)
        assert result.max_velocity == pytest.approx(365.0)
        assert result.max_velocity_with_propulsion == pytest.approx(365.0 * (1 + 1.35 * 1500000.0 / mass))
        assert result.align_time_s == pytest.approx(-math.log(0.25) * 3.19 * mass / 1e6)
        assert result.warp_speed_au == pytest.approx(5.0)
        assert result.warp_speed_ms == pytest.approx(5.0 * AU_IN_METERS)

    def test_skills(self, store, sample_fitting, skilled_character):
        result = asyncio.run(NavigationCalculator(store).calculate(sample_fitting, skilled_character))
        assert result.max_velocity == pytest.approx(365.0 * 1.25)
        assert result.agility == pytest.approx(3.19 * 0.85 * 0.98 ** 4)

    def test_velocity_upgrades_are_penalized(self, store):
        fitting = _rifter(low_slots=[ModuleEntry(sd.OVERDRIVE, SlotCategory.LOW, quantity=2)])
        result = asyncio.run(NavigationCalculator(store).calculate(fitting))
        assert result.max_velocity == pytest.approx(365.0 * 1.125 * (1 + 0.125 * penalty_factor(1)))

    def test_offline_propulsion_adds_mass_only(self, store):
        fitting = _rifter(medium_slots=[ModuleEntry(sd.AFTERBURNER, SlotCategory.MEDIUM, online=False)])
        result = asyncio.run(NavigationCalculator(store).calculate(fitting))
        assert result.mass == pytest.approx(1567000.0)
        assert result.max_velocity_with_propulsion == pytest.approx(result.max_velocity)

    def test_velocity_cap(self, store):
        store.add(
            EntityType(90100, "Test Interceptor", TypeCategory.SHIP, "Test Hull"),
            {"maxVelocity": 12000.0, "mass": 1000000.0, "agility": 1.0},
        )
        fitting = Fitting(id=11, name="Fast", ship_type_id=90100)
        result = asyncio.run(NavigationCalculator(store).calculate(fitting))
        assert result.max_velocity == MAX_SUBWARP_VELOCITY

    def test_align_time_function(self):
        assert align_time(1.0, 1e6) == pytest.approx(math.log(4))


class TestTargeting:
    def test_sample_fitting(self, store, sample_fitting):
        result = asyncio.run(TargetingCalculator(store).calculate(sample_fitting))
        assert result.max_target_range == pytest.approx(22500.0)
        assert result.scan_resolution == pytest.approx(660.0)
        assert result.signature_radius == pytest.approx(38.5)
        # Untrained pilot: two locks regardless of hull
        assert result.max_locked_targets == 2
        assert result.lock_times_s["frigate"] == pytest.approx(lock_time(660.0, 35.0))

    def test_skills(self, store, sample_fitting, skilled_character):
        result = asyncio.run(TargetingCalculator(store).calculate(sample_fitting, skilled_character))
        assert result.max_locked_targets == 4
        assert result.max_target_range == pytest.approx(27000.0)
        assert result.scan_resolution == pytest.approx(825.0)

    def test_sensor_boosters_stack(self, store):
        fitting = _rifter(medium_slots=[ModuleEntry(sd.SENSOR_BOOSTER, SlotCategory.MEDIUM, quantity=2)])
        result = asyncio.run(TargetingCalculator(store).calculate(fitting))
        assert result.max_target_range == pytest.approx(22500.0 * 1.3 * (1 + 0.3 * penalty_factor(1)))

    def test_lock_time(self):
        expected = 40000.0 / (660.0 * math.asinh(35.0) ** 2)
        assert lock_time(660.0, 35.0) == pytest.approx(expected)
        assert lock_time(100000.0, 12000.0) == 1.0
        assert math.isinf(lock_time(0.0, 35.0))

    def test_larger_targets_lock_faster(self, store, sample_fitting):
        result = asyncio.run(TargetingCalculator(store).calculate(sample_fitting))
        assert result.lock_times_s["frigate"] > result.lock_times_s["battleship"]
