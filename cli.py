import argparse
import json
import logging
import shutil
from typing import Optional

from models import ProgressionRule, SetScheme, SplitType, WeightUnit
from rules import CalibrationMath, ProgressionRules, RoutineTemplates, WeightConverter
from seed_sample_data import seed

logger = logging.getLogger(__name__)

UNIT_CHOICES = [u.value for u in WeightUnit]


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def _float_list(raw: str) -> list[float]:
    return [float(v) for v in raw.split(",") if v.strip()]


def render_routine(split: str, legacy_days: Optional[int] = None) -> str:
    if legacy_days is not None:
        routine = RoutineTemplates.make_ul(legacy_days)
    else:
        routine = RoutineTemplates.make_routine(SplitType(split))
    lines = [routine.name]
    for day in routine.days:
        lines.append(f"  {day.label}")
        for item in day.items:
            scheme = item.set_scheme
            line = f"    {item.exercise_name}: {scheme.sets} x {scheme.rep_min}-{scheme.rep_max}"
            if scheme.rpe_note:
                line += f" ({scheme.rpe_note})"
            lines.append(line)
    return "\n".join(lines)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Routine and calibration utilities")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="cmd", required=True)

    conv = sub.add_parser("convert")
    conv.add_argument("--weight", type=float, required=True)
    conv.add_argument("--from", dest="from_unit", choices=UNIT_CHOICES, required=True)
    conv.add_argument("--to", dest="to_unit", choices=UNIT_CHOICES, required=True)

    cal = sub.add_parser("calibrate")
    cal.add_argument("--marked", type=float, required=True)
    cal.add_argument("--a", type=float, default=1.0)
    cal.add_argument("--b", type=float, default=0.0)
    cal.add_argument("--machine-unit", choices=UNIT_CHOICES, default="kg")
    cal.add_argument("--output-unit", choices=UNIT_CHOICES, default="kg")

    fit = sub.add_parser("fit")
    fit.add_argument("--marked", required=True, help="comma separated dial readings")
    fit.add_argument("--real", required=True, help="comma separated measured loads")

    nxt = sub.add_parser("next_load")
    nxt.add_argument("--current", type=float, required=True)
    nxt.add_argument("--reps", type=int, required=True)
    nxt.add_argument("--sets", type=int, default=3)
    nxt.add_argument("--rep-min", type=int, required=True)
    nxt.add_argument("--rep-max", type=int, required=True)
    nxt.add_argument(
        "--rule",
        choices=[r.value for r in ProgressionRule],
        default=ProgressionRule.DOUBLE_PROGRESSION.value,
    )

    tpl = sub.add_parser("template")
    tpl.add_argument("--split", choices=[s.value for s in SplitType], default=SplitType.UPPER_LOWER.value)
    tpl.add_argument("--legacy-days", type=int)
    tpl.add_argument("--json", action="store_true")

    sd = sub.add_parser("seed")
    sd.add_argument("--db", default="gymrar.db")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="gymrar.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="gymrar.db")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.cmd == "convert":
        result = WeightConverter.convert(args.weight, WeightUnit(args.from_unit), WeightUnit(args.to_unit))
        print(
            f"{WeightConverter.format_weight(args.weight, args.from_unit)} = "
            f"{WeightConverter.format_weight(result, args.to_unit)}"
        )
    elif args.cmd == "calibrate":
        real = CalibrationMath.real_weight(
            args.marked,
            WeightUnit(args.machine_unit),
            args.a,
            args.b,
            WeightUnit(args.output_unit),
        )
        print(f"Real ≈ {WeightConverter.format_weight(real, args.output_unit)}")
    elif args.cmd == "fit":
        a, b = CalibrationMath.fit(_float_list(args.marked), _float_list(args.real))
        print(f"a = {a:.4f}, b = {b:.4f}")
    elif args.cmd == "next_load":
        scheme = SetScheme(sets=args.sets, rep_min=args.rep_min, rep_max=args.rep_max)
        load = ProgressionRules.next_load(args.current, args.reps, scheme, ProgressionRule(args.rule))
        print(f"Next load: {load:g}")
    elif args.cmd == "template":
        if args.json:
            if args.legacy_days is not None:
                routine = RoutineTemplates.make_ul(args.legacy_days)
            else:
                routine = RoutineTemplates.make_routine(SplitType(args.split))
            print(json.dumps(routine.model_dump(mode="json"), indent=2))
        else:
            print(render_routine(args.split, args.legacy_days))
    elif args.cmd == "seed":
        if seed(args.db):
            print("Seed data inserted")
        else:
            print("Database already contains gyms")
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)


if __name__ == "__main__":
    main()
