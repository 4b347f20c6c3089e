"""
knowledge_base/sample_data.py
A small, self-consistent set of rate-master rows.

Used by `python main.py demo` when no SQLite database or CSV exports are
available, so every module can be exercised end to end. Column names and cell
formats follow the SPLS exports (strings, Yes/No flags, blank cells).
"""


def _berth(name, dock, quay, draft, beam, **flags):
    row = {
        "BerthName": name, "Dock_Name": dock,
        "Quay_Len": quay, "Draft": draft, "Beam": beam,
    }
    for col in ("Container", "Liquid_Bulk", "Bulk", "RORO", "POL", "PassnCruise", "Bunker"):
        row[col] = "Yes" if flags.get(col) else "No"
    return row


def _manning(line_no, on_board, tindal, winch, signal, mazdoor, maistry, tally):
    return {
        "LINE NO": line_no, "OnBoard": "Y" if on_board else "N",
        "Tindal": tindal, "Winch_driver": winch, "Signal_Man": signal,
        "Mazdoor": mazdoor, "Maistry": maistry, "Tally_clerk": tally,
    }


def _composite(code, **rates):
    return [
        {"Lab_Category": category, "Shift": "Full", "Type_Cargo": code, "Rate": rate}
        for category, rate in rates.items()
    ]


SAMPLE_ROWS: dict[str, list[dict]] = {
    # ── Cargo ────────────────────────────────────────────────────────────────
    "CM_CargoMaster": [
        {"CargoDescription": "Coal", "CargoCategoryName": "Dry Bulk", "SoRNoCode": "W-101",
         "DSCHRG_RATE_PR_DAY": "20000", "LD_RATE_PR_DAY": "15000", "DEMURRAGE_RATE_PR_DAY": "2"},
        {"CargoDescription": "Iron Ore Fines", "CargoCategoryName": "Dry Bulk", "SoRNoCode": "W-102",
         "DSCHRG_RATE_PR_DAY": "", "LD_RATE_PR_DAY": "25000", "DEMURRAGE_RATE_PR_DAY": ""},
        {"CargoDescription": "Sugar", "CargoCategoryName": "Agri Products", "SoRNoCode": "W-205",
         "DSCHRG_RATE_PR_DAY": "3000", "LD_RATE_PR_DAY": "", "DEMURRAGE_RATE_PR_DAY": "4"},
        {"CargoDescription": "Machinery", "CargoCategoryName": "Break Bulk", "SoRNoCode": "W-310",
         "DSCHRG_RATE_PR_DAY": "", "LD_RATE_PR_DAY": "", "DEMURRAGE_RATE_PR_DAY": "6"},
    ],
    "CM_WharfageMaster": [
        {"sor_item": "W-101", "cost_basis": "Weight", "coastal_rate": "30", "foreign_rate": "50"},
        {"sor_item": "W-102", "cost_basis": "Weight", "coastal_rate": "28", "foreign_rate": "46"},
        {"sor_item": "W-205", "cost_basis": "Weight", "coastal_rate": "24", "foreign_rate": "40"},
        {"sor_item": "W-310", "cost_basis": "Value", "coastal_rate": "0.6", "foreign_rate": "1.0"},
    ],
    "CM_DemurrageSlabs": [
        {"Cargo_Category": "Dry Bulk", "Operation_Type": "Both", "Trade_Type": "Both",
         "Storage_Type": "Open", "Start_Day": "0", "End_Day": "2", "Rate": "10", "Rate_Currency": "INR"},
        {"Cargo_Category": "Dry Bulk", "Operation_Type": "Both", "Trade_Type": "Both",
         "Storage_Type": "Open", "Start_Day": "3", "End_Day": "5", "Rate": "20", "Rate_Currency": "INR"},
        {"Cargo_Category": "Dry Bulk", "Operation_Type": "Both", "Trade_Type": "Both",
         "Storage_Type": "Open", "Start_Day": "6", "End_Day": "30", "Rate": "40", "Rate_Currency": "INR"},
        {"Cargo_Category": "Break Bulk", "Operation_Type": "Import", "Trade_Type": "Foreign",
         "Storage_Type": "Both", "Start_Day": "0", "End_Day": "10", "Rate": "0.05", "Rate_Currency": "USD"},
    ],
    # ── Vessel ───────────────────────────────────────────────────────────────
    "VM_berth_master": [
        _berth("EQ-1", "Eastern Dock", "300", "14", "40", Bulk=True),
        _berth("EQ-2", "Eastern Dock", "250", "12.5", "36", Bulk=True),
        _berth("CT-1", "Container Terminal", "350", "15", "48", Container=True),
        _berth("OJ-1", "Oil Jetty", "280", "16", "", Liquid_Bulk=True, POL=True),
        _berth("RR-1", "Western Dock", "220", "10", "32", RORO=True, Bulk=True),
    ],
    "VM_port_dues": [
        {"vessel_type": "Bulk Cargo", "coastal_rate": "4.5", "foreign_rate": "0.11"},
        {"vessel_type": "Container", "coastal_rate": "5.2", "foreign_rate": "0.13"},
        {"vessel_type": "Tankers", "coastal_rate": "6.0", "foreign_rate": "0.15"},
        {"vessel_type": "RoRo", "coastal_rate": "4.8", "foreign_rate": "0.12"},
        {"vessel_type": "Others", "coastal_rate": "4.0", "foreign_rate": "0.10"},
    ],
    "VM_berth_hire": [
        {"vessel_type": "Others", "coastal_rate": "0.02", "foreign_rate": "0.0006"},
        {"vessel_type": "Bulk Cargo", "coastal_rate": "0.018", "foreign_rate": "0.0005"},
        {"vessel_type": "Container", "coastal_rate": "0.025", "foreign_rate": "0.0007"},
        {"vessel_type": "Tankers", "coastal_rate": "0.03", "foreign_rate": "0.0008"},
    ],
    "VM_Pilotage_Master_with_Category": [
        {"GT_Min": "0", "GT_Max": "30000", "Category": "Foreign",
         "Tankers": "0.09", "Container": "0.08", "RoRo": "0.08", "Bulk": "0.07", "Other": "0.06"},
        {"GT_Min": "30001", "GT_Max": "", "Category": "Foreign",
         "Tankers": "0.07", "Container": "0.06", "RoRo": "0.06", "Bulk": "0.05", "Other": "0.05"},
        {"GT_Min": "0", "GT_Max": "30000", "Category": "Coastal",
         "Tankers": "3.6", "Container": "3.2", "RoRo": "3.2", "Bulk": "2.8", "Other": "2.4"},
        {"GT_Min": "30001", "GT_Max": "", "Category": "Coastal",
         "Tankers": "2.8", "Container": "2.4", "RoRo": "2.4", "Bulk": "2.0", "Other": "2.0"},
    ],
    "VM_currency_lookup": [
        {"INR": "1", "USD": "83.2"},
    ],
    # ── Rail ─────────────────────────────────────────────────────────────────
    "RM_WagonMaster": [
        {"wagon_type": "BOXN", "Rake_Size": "58", "Wagon_Group": "Open", "Free_Hours": "9"},
        {"wagon_type": "BLC", "Rake_Size": "45", "Wagon_Group": "Container Flat", "Free_Hours": ""},
    ],
    "RM_RailwaySidingMaster": [
        {"BOX TYPE": "BOXN", "YardCapType": "Full", "Lines": "Line 4", "RailwayYard": "Central Yard",
         "LineType": "Electrified", "Holding Capacity": "58"},
        {"BOX TYPE": "BOXN", "YardCapType": "Partial", "Lines": "Line 7", "RailwayYard": "North Yard",
         "LineType": "Non-electrified", "Holding Capacity": "30"},
        {"BOX TYPE": "BLC", "YardCapType": "Full", "Lines": "Line 2", "RailwayYard": "Container Yard",
         "LineType": "Electrified", "Holding Capacity": "45"},
    ],
    "RM_Haulage": [
        {"category": "non_Container", "Haulage_description": "Loaded Wagon", "H_Rate": "120"},
        {"category": "20ft_Container", "Haulage_description": "Loaded Wagon", "H_Rate": "9000"},
        {"category": "40ft_Container", "Haulage_description": "Loaded Wagon", "H_Rate": "15000"},
        {"category": "Above 40ft_Container", "Haulage_description": "Loaded Wagon", "H_Rate": "18000"},
        {"category": "20ft_Container", "Haulage_description": "Empty Wagon", "H_Rate": "4000"},
    ],
    "RM_TerminalHandling": [
        {"cargo_type": "containerised", "THC_rate": "35"},
        {"cargo_type": "non_containerised", "THC_rate": "20"},
    ],
    "RM_Demurrage": [
        {"Time_start_HRS": "0", "Time_end_HRS": "24", "Dem_Rate": "150"},
        {"Time_start_HRS": "25", "Time_end_HRS": "72", "Dem_Rate": "300"},
        {"Time_start_HRS": "73", "Time_end_HRS": "", "Dem_Rate": "600"},
    ],
    # ── Storage ──────────────────────────────────────────────────────────────
    "SM_StowageFactor": [
        {"Cargo": "Coal", "StowageFactor": "1.3", "Measure": "2.5", "Density": "0.8"},
        {"Cargo": "Sugar", "StowageFactor": "1.5", "Measure": "1.6", "Density": "0.65"},
        {"Cargo": "20 Feet", "StowageFactor": "", "Measure": "14.8", "Density": ""},
        {"Cargo": "40 Feet", "StowageFactor": "", "Measure": "29.7", "Density": ""},
        {"Cargo": "45 Feet", "StowageFactor": "", "Measure": "", "Density": ""},
    ],
    "SM_ImmediateCargoFee": [
        {"S_Type": "Covered", "Start_Date": "0", "End_Date": "30", "Rate_for_15_days": "120", "Area": "10"},
        {"S_Type": "Covered", "Start_Date": "31", "End_Date": "60", "Rate_for_15_days": "180", "Area": "10"},
        {"S_Type": "Open", "Start_Date": "0", "End_Date": "", "Rate_for_15_days": "60", "Area": "10"},
    ],
    "SM_LicenceFee": [
        {"Description": "Open Plot", "Location": "North Yard", "Rate_per_month": "45",
         "Area": "", "S_UoM": "per sq. m."},
        {"Description": "Warehouse Block", "Location": "South Yard", "Rate_per_month": "250000",
         "Area": "1000", "S_UoM": "per block"},
    ],
    # ── Stevedoring ──────────────────────────────────────────────────────────
    "LM_labourDatumMaster": [
        {"LINE_NO": "1", "100_tons_Mobile_Crane": "N", "Datum_per_Crane": "416",
         "Cargo_Type_Description": "Dry bulk by grab"},
        {"LINE_NO": "1", "100_tons_Mobile_Crane": "Y", "Datum_per_Crane": "600",
         "Cargo_Type_Description": "Dry bulk by grab, mobile crane"},
        {"LINE_NO": "2", "100_tons_Mobile_Crane": "N", "Datum_per_Crane": "250",
         "Cargo_Type_Description": "Bagged cargo"},
    ],
    "LM_labourManningMaster": [
        _manning("1", True, 1, 2, 1, 8, 0, 1),
        _manning("1", False, 0, 0, 0, 6, 1, 1),
        _manning("2", True, 1, 1, 1, 12, 1, 2),
        _manning("2", False, 0, 0, 0, 10, 1, 1),
    ],
    "LM_CompositeRate": (
        _composite("ALLOTHCG", **{"Tindal": 1450, "Winch driver": 1380, "Signal Man": 1320,
                                  "Mazdoor": 1200, "Maistry": 1500, "Tally clerk": 1250})
        + _composite("AGPSUBGS", **{"Tindal": 1400, "Winch driver": 1340, "Signal Man": 1280,
                                    "Mazdoor": 1150, "Maistry": 1460, "Tally clerk": 1210})
    ),
    "LM_RoyaltyMaster": [
        {"RltyCargo_Type": "Dry Bulk", "Stevedoring_Royalty": "12", "ShoreHanding_Royalty": "8", "UOM": "ton"},
        {"RltyCargo_Type": "Break Bulk except Automobiles", "Stevedoring_Royalty": "20",
         "ShoreHanding_Royalty": "15", "UOM": "ton"},
        {"RltyCargo_Type": "Container -Laden", "Stevedoring_Royalty": "150",
         "ShoreHanding_Royalty": "100", "UOM": "box"},
    ],
}
