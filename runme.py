import os
import logging
from datetime import datetime
import batch_scan as b
import pandas as pd
pd.options.display.width = 0


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    input_file  = r"samples.csv"
    source_df = pd.read_csv(input_file)

    # Extract input file name without extension and create subfolder
    input_filename = os.path.splitext(os.path.basename(input_file))[0]
    output_folder = os.path.join("scan_results", input_filename)

    # Create the output folder if it doesn't exist
    os.makedirs(output_folder, exist_ok=True)

    res_df = b.scan_all(
                        source_df,
                        text_column="raw_text",
                        max_workers=1,
                        use_threads=True,
                        with_formats=True)

    file_prefix = datetime.now().strftime("%Y-%m-%d %H-%M-%S")
    b.save_results(res_df, os.path.join(output_folder, f"{file_prefix} results.csv"))
    b.explode_matches(res_df).to_csv(os.path.join(output_folder, f"{file_prefix} matches.csv"))

    print(f"")
    print(f"Scanning is Completed!")
    print(f"Scan Results are Saved in: {output_folder}")

if __name__ == "__main__":                           # critical on Windows
    main()
