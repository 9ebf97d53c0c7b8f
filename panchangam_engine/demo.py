"""
demo.py
=======
Demonstration of the Panchangam Engine.
Run: panchangam-demo [--date YYYY-MM-DD] [--city NAME]

Prints the day's rasi chart, Rahu Kaal / Yamaganda, Gowri Nalla Neram and
panchang for one city.
"""

import argparse
import logging
from datetime import date

from .tools.panchangam import (
    build_context, daily_chart, auspicious_times, complete_panchang, gowri_nalla_neram,
)


def print_section(title: str):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def format_planet_table(planets: dict) -> str:
    lines = [f"{'Graha':<10} {'Rasi':<12} {'Degree':<14} {'Nakshatra':<20}"]
    lines.append("─" * 60)
    for name, p in planets.items():
        lines.append(
            f"{name:<10} {p['rasi']:<12} {p['degree_formatted']:<14} {p['nakshatra']:<20}"
        )
    return "\n".join(lines)


def _element_line(label: str, e: dict, extra: str = "") -> str:
    start = f"{e['start']}{' (' + e['start_marker'] + ')' if e['start_marker'] else ''}"
    end = f"{e['end']}{' (' + e['end_marker'] + ')' if e['end_marker'] else ''}"
    return (f"  {label:<12}: {e['name']}{extra}  {e['progress']}% done, "
            f"{start} → {end}")


def run_demo(day: str, city: str):
    ctx = build_context()

    print("=" * 60)
    print("   PANCHANGAM ENGINE — DAILY REPORT")
    print("=" * 60)

    chart = daily_chart(ctx, day, "05:30", city)
    loc = chart["location"]
    print(f"\n  Date        : {chart['date']}")
    print(f"  Location    : {loc['name']} ({loc['latitude']}°N, {loc['longitude']}°E, "
          f"UTC+{loc['utc_offset']})")
    print(f"  Ayanamsa    : Lahiri {chart['ayanamsa']:.4f}°")

    print_section("RASI CHART (05:30 local)")
    asc = chart["ascendant"]
    print(f"  Lagna       : {asc['rasi']} ({asc['rasi_tamil']}) {asc['longitude']:.2f}°")
    print(format_planet_table(chart["planets"]))

    times = auspicious_times(ctx, day, city)
    print_section("SUNRISE / RAHU KAAL / YAMAGANDA")
    print(f"  Weekday     : {times['weekday']['name']} ({times['weekday']['tamil']})")
    print(f"  Sunrise     : {times['sunrise']}   Sunset: {times['sunset']}   [{times['source']}]")
    rk = times["rahu_kaal"]
    print(f"  Rahu Kaal   : {rk['start']} — {rk['end']}  ({rk['duration']})")
    yg = times["yamaganda"]
    print(f"  Yamaganda   : {yg['day_period']['start']} — {yg['day_period']['end']} (day), "
          f"{yg['night_period']['start']} — {yg['night_period']['end']} (night)")

    gowri = gowri_nalla_neram(ctx, day, city)
    print_section("GOWRI NALLA NERAM")
    for slot in gowri["nalla_neram"]:
        print(f"  {slot['period']:<6} Gowri {slot['gowri_index']}: "
              f"{slot['start']} — {slot['end']}  ({slot['duration']})")

    p = complete_panchang(ctx, day, city)
    print_section("PANCHANG")
    print(_element_line("Tithi", p["tithi"], f" ({p['tithi']['paksha']} Paksha)"))
    if p["tithi"]["special_note"]:
        print(f"  {'':<12}  {p['tithi']['special_note']}")
    print(_element_line("Nakshatra", p["nakshatra"], f" (Pada {p['nakshatra']['pada']})"))
    print(_element_line("Yoga", p["yoga"], f" [{p['yoga']['nature']}]"))
    print(_element_line("Karana", p["karana"], f" [{p['karana']['nature']}]"))

    print("\n")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print a daily Panchangam report.")
    parser.add_argument("--date", default=date.today().isoformat(), help="YYYY-MM-DD")
    parser.add_argument("--city", default="Chennai")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    run_demo(args.date, args.city)


if __name__ == "__main__":
    main()
