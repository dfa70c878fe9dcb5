import logging
import os
import time
import concurrent.futures as cf
import pandas as pd
import numpy as np
from tqdm import tqdm
from datetime_scan import find_date_times
from utils import convert_lists, convert_value_to_string, flatten_match

logger = logging.getLogger(__name__)

def _single_row_worker(row_tuple):
    """Runs in a separate process / thread.
       Accepts (i, text, with_formats) because
       top-level, pickle-friendly functions are required for ProcessPools.
    """
    i, text, with_formats = row_tuple
    row_out = {}                # what we will send back

    row_start_time = time.time()
    try:
        text = "" if pd.isna(text) else str(text)
        matches = find_date_times(text)

        row_out['Res: matches'] = [flatten_match(m, with_formats) for m in matches]
        row_out['Res: match count'] = len(matches)
        row_out["Sys: exception"] = np.nan          # keep column dtype homogeneous

    except Exception as e:
        row_out['Sys: exception'] = e

    row_out['Sys: time taken'] = time.time() - row_start_time

    row_out["_orig_index"] = i                  # re-index later
    return row_out

def scan_all(df: pd.DataFrame,
             text_column: str = "raw_text",
             max_workers: int | None = 1,
             use_threads: bool = True,
             with_formats: bool = False) -> pd.DataFrame:
    """ For each row of df finds the date/time fragments in 'text_column' and adds results
        Input
            'df' - pandas dataframe with a text column, index must be unique
            'text_column' - name of the column with the text to scan
            'with_formats' - also add every format option of every match

        Returns pandas data frame same as df but with added columns:
            'Res: matches' - list of flattened matches (see utils.flatten_match)
            'Res: match count' - number of matches
            'Sys: exception' - exception information if there was an exception
            'Sys: time taken' - time taken in seconds

        ``use_threads=False`` → processes
        ``use_threads=True``  → ThreadPoolExecutor

        To use all cores set max_workers = None

        If use_threads = False dont forget to wrap outer code in
            if __name__ == "__main__":
                main()
    """
    if text_column not in df.columns:
        raise ValueError(f"Text column '{text_column}' is missing from df")

    if df.index.has_duplicates:
        raise ValueError("Please remove duplicate values in index column")

    # prepare data once to avoid pickling the whole DataFrame for every task
    tasks = [(i, text, with_formats) for i, text in df[text_column].items()]

    Executor = cf.ThreadPoolExecutor if use_threads else cf.ProcessPoolExecutor
    max_workers = max_workers or os.cpu_count()

    results = []
    with Executor(max_workers=max_workers) as pool:
        # tqdm + as_completed gives a responsive progress bar
        for f in tqdm(cf.as_completed([pool.submit(_single_row_worker, t) for t in tasks]),
                      total=len(tasks),
                      desc="Scanning rows"):
            results.append(f.result())

    if not results:
        res_df = df.copy()
        for col in ['Res: matches', 'Res: match count', 'Sys: exception', 'Sys: time taken']:
            res_df[col] = pd.Series(dtype=object)
        return res_df

    # Re-assemble – much faster than repeatedly appending rows
    res_df = pd.DataFrame(results).set_index("_orig_index")
    res_df.index.name = df.index.name
    res_df = df.join(res_df, how="left")            # preserve original cols & order

    exceptions_no = int(res_df['Sys: exception'].notna().sum())
    logger.info("scanned %d rows, %d matches, %d exceptions",
                len(res_df), int(res_df['Res: match count'].fillna(0).sum()), exceptions_no)

    return res_df

def explode_matches(res_df: pd.DataFrame) -> pd.DataFrame:
    """ One row per match from the 'Res: matches' column of scan_all output.
        The index of the originating row is kept, rows without matches are dropped.
    """
    if 'Res: matches' not in res_df.columns:
        raise ValueError("'Res: matches' column is missing, run scan_all first")

    matches = res_df['Res: matches'].explode().dropna()
    if matches.empty:
        return pd.DataFrame()

    return pd.DataFrame(matches.tolist(), index=matches.index)

def save_results(res_df: pd.DataFrame, file_path: str):
    """ Write scan_all output to csv, lists of matches are stored as JSON. """
    out_df = res_df.copy()
    out_df['Res: matches'] = out_df['Res: matches'].map(convert_value_to_string)
    out_df.to_csv(file_path)

def load_results(file_path: str, index_col=0) -> pd.DataFrame:
    """ Read a csv written by save_results back, with 'Res: matches' parsed into lists again. """
    res_df = pd.read_csv(file_path, index_col=index_col)
    return convert_lists(res_df)
